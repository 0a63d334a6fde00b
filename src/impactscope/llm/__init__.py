"""LLM module - Ollama and Claude providers."""

from impactscope.llm.base import BaseLLMProvider
from impactscope.llm.claude_provider import ClaudeProvider
from impactscope.llm.ollama_provider import OllamaProvider
from impactscope.llm.router import LLMRouter

__all__ = [
    "BaseLLMProvider",
    "OllamaProvider",
    "ClaudeProvider",
    "LLMRouter",
]
