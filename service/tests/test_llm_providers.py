"""Tests for LLM provider abstraction and factory."""

from unittest.mock import MagicMock, patch

import pytest

from app.config import Settings
from app.llm.provider import LLMProvider, create_provider


@pytest.fixture
def vertex_settings(settings: Settings) -> Settings:
    settings.llm_provider = "vertex_ai"
    return settings


@pytest.fixture
def openrouter_settings(settings: Settings) -> Settings:
    settings.llm_provider = "openrouter"
    return settings


class TestCreateProvider:
    def test_invalid_provider_raises(self, settings: Settings) -> None:
        settings.llm_provider = "nonexistent"
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_provider(settings)

    def test_groq_factory(self, settings: Settings) -> None:
        provider = create_provider(settings)
        assert isinstance(provider, LLMProvider)
        assert provider.get_model_name() == "groq/deepseek-r1-distill-llama-70b"

    def test_vertex_ai_factory(self, vertex_settings: Settings) -> None:
        provider = create_provider(vertex_settings)
        assert isinstance(provider, LLMProvider)
        assert provider.get_model_name() == "vertex_ai/gemini-2.0-flash"

    def test_openrouter_factory(self, openrouter_settings: Settings) -> None:
        provider = create_provider(openrouter_settings)
        assert isinstance(provider, LLMProvider)
        assert "openrouter" in provider.get_model_name()


class TestGroqProvider:
    @patch("app.llm.groq.ChatOpenAI")
    def test_get_chat_model(self, mock_cls: MagicMock, settings: Settings) -> None:
        provider = create_provider(settings)
        provider.get_chat_model(temperature=0.7, max_tokens=475)
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["openai_api_base"] == "https://api.groq.com/openai/v1"
        assert kwargs["openai_api_key"] == "test-key"
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 475
        assert kwargs["model_kwargs"] == {}

    @patch("app.llm.groq.ChatOpenAI")
    def test_json_output(self, mock_cls: MagicMock, settings: Settings) -> None:
        create_provider(settings).get_chat_model(json_output=True)
        assert mock_cls.call_args.kwargs["model_kwargs"] == {
            "response_format": {"type": "json_object"}
        }


class TestOpenRouterProvider:
    @patch("app.llm.openrouter.ChatOpenAI")
    def test_get_chat_model(self, mock_cls: MagicMock, openrouter_settings: Settings) -> None:
        create_provider(openrouter_settings).get_chat_model()
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["openai_api_base"] == "https://openrouter.ai/api/v1"
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 2048


class TestVertexAIProvider:
    @patch("app.llm.vertex_ai.ChatVertexAI")
    def test_get_chat_model(self, mock_cls: MagicMock, vertex_settings: Settings) -> None:
        create_provider(vertex_settings).get_chat_model(max_tokens=600, json_output=True)
        kwargs = mock_cls.call_args.kwargs
        assert kwargs["project"] == "test-project"
        assert kwargs["max_output_tokens"] == 600
        assert kwargs["response_mime_type"] == "application/json"

    @patch("app.llm.vertex_ai.ChatVertexAI")
    def test_plain_text_has_no_mime_type(
        self, mock_cls: MagicMock, vertex_settings: Settings
    ) -> None:
        create_provider(vertex_settings).get_chat_model()
        assert "response_mime_type" not in mock_cls.call_args.kwargs
