"""Configuration management for impactscope."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from impactscope.core.constants import (
    DEFAULT_CLAUDE_MODEL,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_MAX_TOKENS,
    DEFAULT_OLLAMA_HOST,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_ORACLE_TIMEOUT_SECONDS,
    DEFAULT_TEMPERATURE,
    GLOBAL_CONFIG_FILE,
    MAX_CONTEXT_CHARS,
    MAX_FILE_SIZE_KB,
)
from impactscope.core.exceptions import ConfigError


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    preferred_provider: str = Field("claude", description="'ollama' or 'claude'")
    ollama_model: str = Field(DEFAULT_OLLAMA_MODEL)
    ollama_host: str = Field(DEFAULT_OLLAMA_HOST)
    claude_model: str = Field(DEFAULT_CLAUDE_MODEL)
    anthropic_api_key: str | None = Field(None, description="Anthropic API key (or use env var)")
    fallback_enabled: bool = Field(True, description="Fall back to the other provider on connection errors")
    temperature: float = Field(DEFAULT_TEMPERATURE)
    max_tokens: int = Field(DEFAULT_MAX_TOKENS)


class PipelineConfig(BaseModel):
    """Fan-out settings for oracle calls."""

    max_concurrency: int = Field(
        DEFAULT_MAX_CONCURRENCY,
        ge=0,
        description="Maximum in-flight oracle calls (0 = unbounded)",
    )
    oracle_timeout_seconds: float | None = Field(
        DEFAULT_ORACLE_TIMEOUT_SECONDS,
        description="Per-call timeout; None disables it",
    )


class DiscoveryConfig(BaseModel):
    """Caller discovery configuration."""

    max_context_chars: int = Field(MAX_CONTEXT_CHARS, description="Cap on caller context sent per change")


class RepositoriesConfig(BaseModel):
    """Repository loading configuration."""

    exclude_patterns: list[str] = Field(default_factory=lambda: DEFAULT_EXCLUDE_PATTERNS.copy())
    max_file_size_kb: int = Field(MAX_FILE_SIZE_KB)
    clone_depth: int = Field(1)
    branch: str | None = Field(None)


class ImpactScopeConfig(BaseModel):
    """Top-level configuration stored in ~/.impactscope/config.yaml."""

    version: str = Field("1.0")
    llm: LLMConfig = Field(default_factory=LLMConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    repositories: RepositoriesConfig = Field(default_factory=RepositoriesConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> "ImpactScopeConfig":
        """Load configuration from a YAML file."""
        path = path or GLOBAL_CONFIG_FILE
        if not path.exists():
            return cls()
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data)
        except Exception as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    def save(self, path: Path | None = None) -> None:
        """Save configuration to a YAML file."""
        path = path or GLOBAL_CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(path, "w") as f:
                yaml.dump(
                    self.model_dump(exclude_none=True),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except Exception as e:
            raise ConfigError(f"Failed to save config to {path}: {e}") from e
