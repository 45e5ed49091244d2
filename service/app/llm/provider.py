"""Model-agnostic LLM provider abstraction.

Swapping Groq for OpenRouter or Gemini is a config change
(DSOLAR_LLM_PROVIDER), no code changes needed. Every provider returns a
LangChain BaseChatModel so the chat pipeline is provider-agnostic.
"""

from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel

from app.config import Settings


class LLMProvider(ABC):
    """Interface that every LLM backend must implement."""

    @abstractmethod
    def get_chat_model(
        self,
        *,
        temperature: float = 0.1,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> BaseChatModel:
        """Return a LangChain chat model configured for one kind of call.

        ``json_output`` asks the backend for a JSON object response where
        the API supports it.
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """Human-readable model identifier for logging."""


def create_provider(settings: Settings) -> LLMProvider:
    """Factory: instantiate the configured LLM provider."""
    if settings.llm_provider == "groq":
        from app.llm.groq import GroqProvider

        return GroqProvider(settings)

    if settings.llm_provider == "openrouter":
        from app.llm.openrouter import OpenRouterProvider

        return OpenRouterProvider(settings)

    if settings.llm_provider == "vertex_ai":
        from app.llm.vertex_ai import VertexAIProvider

        return VertexAIProvider(settings)

    raise ValueError(
        f"Unknown LLM provider: {settings.llm_provider!r}. "
        "Must be 'groq', 'openrouter' or 'vertex_ai'."
    )
