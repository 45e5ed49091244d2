"""Completion provider: one awaited chat completion with a timeout.

Wraps an LLMProvider so the chat router deals in plain ChatTurns and
strings, never in LangChain message classes. Every failure, including a
timeout, surfaces as ProviderFailure so callers have exactly one
exception to absorb.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel

from app.errors import ProviderFailure
from app.llm.provider import LLMProvider

logger = logging.getLogger(__name__)


class ChatTurn(BaseModel):
    """One message of a conversation."""

    role: Literal["system", "user", "assistant"]
    content: str


_MESSAGE_TYPES: dict[str, type[BaseMessage]] = {
    "system": SystemMessage,
    "user": HumanMessage,
    "assistant": AIMessage,
}


def to_langchain_messages(turns: Sequence[ChatTurn]) -> list[BaseMessage]:
    return [_MESSAGE_TYPES[turn.role](content=turn.content) for turn in turns]


def _text_of(content: str | list) -> str:
    """Flatten LangChain message content (a string or a list of parts)."""
    if isinstance(content, str):
        return content
    parts: list[str] = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(str(part.get("text", "")))
    return "".join(parts)


class CompletionProvider:
    """Chat completions against the configured LLM backend."""

    def __init__(self, provider: LLMProvider, timeout_seconds: float) -> None:
        self._provider = provider
        self._timeout_seconds = timeout_seconds

    @property
    def model_name(self) -> str:
        return self._provider.get_model_name()

    async def complete(
        self,
        messages: Sequence[ChatTurn],
        *,
        temperature: float = 0.1,
        max_tokens: int = 2048,
        json_output: bool = False,
    ) -> str:
        """Return the completion text for ``messages``.

        Raises ProviderFailure on timeout or any backend error.
        """
        start = time.monotonic()
        try:
            llm = self._provider.get_chat_model(
                temperature=temperature,
                max_tokens=max_tokens,
                json_output=json_output,
            )
            response = await asyncio.wait_for(
                llm.ainvoke(to_langchain_messages(messages)),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderFailure(
                f"Completion timed out after {self._timeout_seconds:.1f}s"
            ) from exc
        except Exception as exc:
            raise ProviderFailure(f"Completion failed: {exc}") from exc

        logger.info(
            "Completion finished in %.0fms (model=%s, json=%s)",
            (time.monotonic() - start) * 1000,
            self.model_name,
            json_output,
        )
        return _text_of(response.content)
