"""Chat endpoint: answer a customer message about D-Solar systems.

The ChatRouter on app.state decides whether the reply comes from the
package catalogue, an FAQ, or the completion provider. This module only
validates input, shapes the JSON and records one analytics row per
request.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.chat.router import ChatRouter
from app.guardrails.input_validator import validate_history, validate_message
from app.llm.completion import ChatTurn
from app.observability.logger import log_chat

logger = logging.getLogger(__name__)

router = APIRouter()

_INTERNAL_ERROR = "An internal error occurred while processing your message."


class ChatRequest(BaseModel):
    message: str
    history: list[ChatTurn] = Field(default_factory=list)


class ChatResponse(BaseModel):
    message: str
    source: str
    is_pricing_query: bool = Field(default=False, serialization_alias="isPricingQuery")


@router.post("/api/chat", response_model=None)
async def chat(body: ChatRequest, request: Request) -> JSONResponse:
    settings = request.app.state.settings
    chat_router: ChatRouter = request.app.state.chat_router
    model_name = request.app.state.completion.model_name

    message = validate_message(body.message, settings.max_message_length)
    history = validate_history(body.history, settings.max_message_length)

    start = time.monotonic()
    try:
        result = await chat_router.route(message, history)
    except Exception:
        logger.exception("Error while routing chat message")
        log_chat(
            settings.chat_log_table,
            message=message,
            source="error",
            model_used=model_name,
            latency_ms=(time.monotonic() - start) * 1000,
            status="error",
            error_message=_INTERNAL_ERROR,
        )
        return JSONResponse(status_code=500, content={"error": _INTERNAL_ERROR})

    log_chat(
        settings.chat_log_table,
        message=message,
        source=result.source,
        intent=result.intent,
        faq_id=result.faq_id,
        model_used=model_name,
        latency_ms=(time.monotonic() - start) * 1000,
        status="error" if result.source == "error" else "success",
    )

    response = ChatResponse(
        message=result.text,
        source=result.source,
        is_pricing_query=result.is_pricing_query,
    )
    return JSONResponse(content=response.model_dump(by_alias=True))
