"""Vertex AI (Gemini) LLM provider.

Uses langchain-google-vertexai for native GCP integration. JSON replies
are requested through the response MIME type rather than a prompt-only
instruction.
"""

from langchain_core.language_models import BaseChatModel
from langchain_google_vertexai import ChatVertexAI

from app.config import Settings
from app.llm.provider import LLMProvider


class VertexAIProvider(LLMProvider):
    def __init__(self, settings: Settings) -> None:
        self._model_name = settings.vertex_model
        self._project = settings.gcp_project
        self._location = settings.gcp_region

    def get_chat_model(
        self,
        *,
        temperature: float = 0.1,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> BaseChatModel:
        extra = {"response_mime_type": "application/json"} if json_output else {}
        return ChatVertexAI(
            model_name=self._model_name,
            project=self._project,
            location=self._location,
            temperature=temperature,
            max_output_tokens=max_tokens,
            **extra,
        )

    def get_model_name(self) -> str:
        return f"vertex_ai/{self._model_name}"
