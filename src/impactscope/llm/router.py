"""LLM router for provider selection and fallback."""

import asyncio
import logging

from impactscope.core.config import LLMConfig
from impactscope.core.exceptions import LLMConnectionError, LLMError
from impactscope.llm.base import BaseLLMProvider
from impactscope.llm.claude_provider import ClaudeProvider
from impactscope.llm.ollama_provider import OllamaProvider

logger = logging.getLogger(__name__)


class LLMRouter:
    """Routes LLM requests to appropriate provider with fallback support."""

    def __init__(self, config: LLMConfig) -> None:
        """
        Initialize the router.

        Args:
            config: LLM configuration
        """
        self.config = config
        self._ollama: OllamaProvider | None = None
        self._claude: ClaudeProvider | None = None

    @property
    def ollama(self) -> OllamaProvider:
        """Get Ollama provider."""
        if self._ollama is None:
            self._ollama = OllamaProvider(
                model=self.config.ollama_model,
                host=self.config.ollama_host,
            )
        return self._ollama

    @property
    def claude(self) -> ClaudeProvider:
        """Get Claude provider."""
        if self._claude is None:
            self._claude = ClaudeProvider(
                model=self.config.claude_model,
                api_key=self.config.anthropic_api_key,
            )
        return self._claude

    def get_preferred_provider(self) -> BaseLLMProvider:
        """Get the preferred provider based on config."""
        if self.config.preferred_provider == "ollama":
            return self.ollama
        return self.claude

    def get_fallback_provider(self) -> BaseLLMProvider | None:
        """Get the fallback provider if enabled."""
        if not self.config.fallback_enabled:
            return None

        if self.config.preferred_provider == "ollama":
            return self.claude
        return self.ollama

    @staticmethod
    async def _available(provider: BaseLLMProvider) -> bool:
        # Availability probes may do blocking HTTP; keep them off the event loop
        return await asyncio.to_thread(provider.is_available)

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a completion with automatic fallback.

        Args:
            prompt: User prompt
            system: Optional system prompt
            json_mode: Request a bare JSON object where supported

        Returns:
            Generated text
        """
        primary = self.get_preferred_provider()
        fallback = self.get_fallback_provider()
        kwargs = {
            "system": system,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "json_mode": json_mode,
        }

        try:
            if await self._available(primary):
                return await primary.complete(prompt, **kwargs)
            elif fallback and await self._available(fallback):
                logger.debug("%s unavailable, using %s", primary.name, fallback.name)
                return await fallback.complete(prompt, **kwargs)
            else:
                raise LLMError("No LLM provider available")
        except LLMConnectionError:
            if fallback and await self._available(fallback):
                logger.warning("Connection to %s failed, falling back to %s", primary.name, fallback.name)
                return await fallback.complete(prompt, **kwargs)
            raise

    def get_status(self) -> dict[str, bool]:
        """Get availability status of all providers."""
        return {
            "ollama": self.ollama.is_available(),
            "claude": self.claude.is_available(),
        }
