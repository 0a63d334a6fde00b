"""Base LLM interface."""

from abc import ABC, abstractmethod


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name."""
        ...

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.1,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a completion.

        Args:
            prompt: User prompt
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            json_mode: Ask the provider for a bare JSON object if it supports it

        Returns:
            Generated text
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        ...
