"""Ollama LLM provider."""

import httpx
import ollama

from impactscope.core.constants import DEFAULT_OLLAMA_HOST, DEFAULT_OLLAMA_MODEL
from impactscope.core.exceptions import LLMConnectionError, LLMError
from impactscope.llm.base import BaseLLMProvider


class OllamaProvider(BaseLLMProvider):
    """Ollama local LLM provider."""

    def __init__(
        self,
        model: str = DEFAULT_OLLAMA_MODEL,
        host: str = DEFAULT_OLLAMA_HOST,
    ) -> None:
        self.model = model
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        self._sync_client = ollama.Client(host=host)
        self._available: bool | None = None

    @property
    def name(self) -> str:
        return "ollama"

    def is_available(self) -> bool:
        """Check if Ollama is running and the model is pulled (cached after first probe)."""
        if self._available is None:
            self._available = self._probe()
        return self._available

    def _probe(self) -> bool:
        try:
            response = self._sync_client.list()
            # Handle both old dict API and new Pydantic model API
            if hasattr(response, "models"):
                model_names = [m.model for m in response.models]
            else:
                model_names = [m.get("name", m.get("model", "")) for m in response.get("models", [])]

            return any(
                self.model in name or name.startswith(self.model.split(":")[0])
                for name in model_names
            )
        except (ollama.ResponseError, httpx.HTTPError, ConnectionError):
            return False

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.1,
        json_mode: bool = False,
    ) -> str:
        """Generate a completion using Ollama."""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        try:
            response = await self._client.chat(
                model=self.model,
                messages=messages,
                format="json" if json_mode else None,
                options={
                    "num_predict": max_tokens,
                    "temperature": temperature,
                },
            )
            return response["message"]["content"]
        except ollama.ResponseError as e:
            raise LLMError(f"Ollama error: {e}") from e
        except (httpx.ConnectError, ConnectionError) as e:
            self._available = False
            raise LLMConnectionError(f"Cannot connect to Ollama at {self.host}") from e
