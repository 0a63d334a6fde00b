"""Core module - configuration, constants, exceptions."""

from impactscope.core.config import (
    DiscoveryConfig,
    ImpactScopeConfig,
    LLMConfig,
    PipelineConfig,
    RepositoriesConfig,
)
from impactscope.core.exceptions import (
    ConfigError,
    ImpactScopeError,
    LLMConnectionError,
    LLMError,
    MissingInput,
    OracleInvocationFailure,
    RepositoryLoadError,
    TargetNotFound,
    UnparsableSource,
)

__all__ = [
    "ImpactScopeConfig",
    "LLMConfig",
    "PipelineConfig",
    "DiscoveryConfig",
    "RepositoriesConfig",
    "ImpactScopeError",
    "ConfigError",
    "MissingInput",
    "TargetNotFound",
    "UnparsableSource",
    "OracleInvocationFailure",
    "RepositoryLoadError",
    "LLMError",
    "LLMConnectionError",
]
