"""Groq LLM provider.

Groq serves an OpenAI-compatible endpoint, so langchain-openai's
ChatOpenAI works against it unchanged. The default model is a DeepSeek
R1 distill, which emits <think> blocks that the chat pipeline strips.
"""

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from app.config import Settings
from app.llm.provider import LLMProvider

_GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class GroqProvider(LLMProvider):
    def __init__(self, settings: Settings) -> None:
        self._model_name = settings.groq_model
        self._api_key = settings.groq_api_key

    def get_chat_model(
        self,
        *,
        temperature: float = 0.1,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> BaseChatModel:
        model_kwargs = {"response_format": {"type": "json_object"}} if json_output else {}
        return ChatOpenAI(
            model=self._model_name,
            openai_api_key=self._api_key,
            openai_api_base=_GROQ_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
            model_kwargs=model_kwargs,
        )

    def get_model_name(self) -> str:
        return f"groq/{self._model_name}"
