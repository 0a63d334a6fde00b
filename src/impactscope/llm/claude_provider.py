"""Claude API LLM provider."""

import os

import anthropic

from impactscope.core.constants import DEFAULT_CLAUDE_MODEL
from impactscope.core.exceptions import LLMConnectionError, LLMError
from impactscope.llm.base import BaseLLMProvider


class ClaudeProvider(BaseLLMProvider):
    """Anthropic Claude API provider."""

    def __init__(
        self,
        model: str = DEFAULT_CLAUDE_MODEL,
        api_key: str | None = None,
    ) -> None:
        self.model = model
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def name(self) -> str:
        return "claude"

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Get or create async client."""
        if self._client is None:
            if not self.api_key:
                raise LLMError("ANTHROPIC_API_KEY not set")
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        return self._client

    def is_available(self) -> bool:
        """Check if Claude API is available."""
        return bool(self.api_key)

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.1,
        json_mode: bool = False,
    ) -> str:
        """Generate a completion using Claude."""
        client = self._get_client()

        # No native JSON mode; the prompt carries the schema
        try:
            message = await client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system or "You are an expert software architect.",
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as e:
            raise LLMConnectionError(f"Cannot connect to Claude API: {e}") from e
        except anthropic.APIError as e:
            raise LLMError(f"Claude API error: {e}") from e

        texts = [block.text for block in message.content if getattr(block, "type", None) == "text"]
        if not texts:
            raise LLMError("Claude returned no text content")
        return "".join(texts)
