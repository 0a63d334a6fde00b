"""Custom exceptions for impactscope."""


class ImpactScopeError(Exception):
    """Base exception for all impactscope errors."""

    pass


class ConfigError(ImpactScopeError):
    """Raised when there's an error with configuration."""

    pass


class MissingInput(ImpactScopeError):
    """Raised when a required analysis argument is missing or blank."""

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f"Required argument '{argument}' is missing or blank.")


class TargetNotFound(ImpactScopeError):
    """Raised when the target file cannot be resolved in the corpus."""

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Target file '{target}' was not found in the selected repositories.")


class UnparsableSource(ImpactScopeError):
    """Raised when source text cannot be turned into a declaration snapshot."""

    def __init__(self, file_id: str | None = None, reason: str = "syntax errors") -> None:
        self.file_id = file_id
        self.reason = reason
        where = f" '{file_id}'" if file_id else ""
        super().__init__(f"Could not parse source{where}: {reason}")


class OracleInvocationFailure(ImpactScopeError):
    """Raised when the reasoning oracle fails for a single change."""

    def __init__(self, member: str, category: str, detail: str) -> None:
        self.member = member
        self.category = category
        self.detail = detail
        super().__init__(f"Oracle {category} for '{member}': {detail}")


class RepositoryLoadError(ImpactScopeError):
    """Raised when a repository snapshot cannot be loaded."""

    pass


class LLMError(ImpactScopeError):
    """Raised when there's an error with LLM providers."""

    pass


class LLMConnectionError(LLMError):
    """Raised when unable to connect to LLM provider."""

    pass
