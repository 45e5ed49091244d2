"""Tests for the completion provider wrapper."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from app.errors import ProviderFailure
from app.llm.completion import ChatTurn, CompletionProvider, to_langchain_messages
from app.llm.provider import LLMProvider


def _provider_returning(llm: MagicMock) -> MagicMock:
    provider = MagicMock(spec=LLMProvider)
    provider.get_chat_model.return_value = llm
    provider.get_model_name.return_value = "groq/test-model"
    return provider


class TestToLangchainMessages:
    def test_roles_map_to_message_types(self) -> None:
        messages = to_langchain_messages(
            [
                ChatTurn(role="system", content="be brief"),
                ChatTurn(role="user", content="hi"),
                ChatTurn(role="assistant", content="hello"),
            ]
        )
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage]
        assert messages[1].content == "hi"


class TestCompletionProvider:
    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        llm = MagicMock()
        llm.ainvoke = AsyncMock(return_value=AIMessage(content="Solar is great"))
        provider = _provider_returning(llm)
        completion = CompletionProvider(provider, timeout_seconds=5)

        text = await completion.complete(
            [ChatTurn(role="user", content="hi")],
            temperature=0.7,
            max_tokens=475,
        )

        assert text == "Solar is great"
        provider.get_chat_model.assert_called_once_with(
            temperature=0.7, max_tokens=475, json_output=False
        )
        assert completion.model_name == "groq/test-model"

    @pytest.mark.asyncio
    async def test_flattens_content_parts(self) -> None:
        llm = MagicMock()
        llm.ainvoke = AsyncMock(
            return_value=AIMessage(
                content=[{"type": "text", "text": '{"canAnswer": '}, "false}"]
            )
        )
        completion = CompletionProvider(_provider_returning(llm), timeout_seconds=5)

        text = await completion.complete([ChatTurn(role="user", content="hi")], json_output=True)

        assert text == '{"canAnswer": false}'

    @pytest.mark.asyncio
    async def test_backend_error_becomes_provider_failure(self) -> None:
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("401 Unauthorized"))
        completion = CompletionProvider(_provider_returning(llm), timeout_seconds=5)

        with pytest.raises(ProviderFailure, match="401 Unauthorized"):
            await completion.complete([ChatTurn(role="user", content="hi")])

    @pytest.mark.asyncio
    async def test_timeout_becomes_provider_failure(self) -> None:
        async def never_returns(_messages: object) -> AIMessage:
            await asyncio.sleep(10)
            return AIMessage(content="late")

        llm = MagicMock()
        llm.ainvoke = never_returns
        completion = CompletionProvider(_provider_returning(llm), timeout_seconds=0.01)

        with pytest.raises(ProviderFailure, match="timed out"):
            await completion.complete([ChatTurn(role="user", content="hi")])
