"""FastAPI application factory for the D-Solar chat service.

Initializes settings, the LLM provider, the knowledge base and the chat
router on startup via the lifespan context manager, stored on app.state
so routers can access them without globals.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.chat.router import ChatRouter
from app.config import Settings
from app.knowledge.store import KnowledgeBase, create_knowledge_base
from app.llm.completion import CompletionProvider
from app.llm.provider import create_provider
from app.routers import chat, health

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_chat_router(
    settings: Settings, knowledge_base: KnowledgeBase, completion: CompletionProvider
) -> ChatRouter:
    return ChatRouter(
        knowledge_base,
        completion,
        best_match_threshold=settings.best_match_threshold,
        relevant_faq_threshold=settings.relevant_faq_threshold,
        relevant_faq_limit=settings.relevant_faq_limit,
        local_answer_min_score=settings.local_answer_min_score,
        faq_confidence_threshold=settings.faq_confidence_threshold,
        faq_confidence_enabled=settings.faq_confidence_enabled,
        escalate_ambiguous_intent=settings.escalate_ambiguous_intent,
        emoji_enabled=settings.emoji_enabled,
        max_history_turns=settings.max_history_turns,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize shared resources on startup."""
    settings = Settings()
    provider = create_provider(settings)
    completion = CompletionProvider(provider, settings.provider_timeout_seconds)
    knowledge_base = create_knowledge_base(settings)

    app.state.settings = settings
    app.state.completion = completion
    app.state.knowledge_base = knowledge_base
    app.state.chat_router = build_chat_router(settings, knowledge_base, completion)

    logger.info(
        "D-Solar chat service ready (model=%s, chat_log=%s)",
        completion.model_name,
        settings.chat_log_table or "disabled",
    )
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="D-Solar Chat Service",
        description="Customer chat assistant for D-Solar solar installations",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(health.router)
    app.include_router(chat.router)
    return app
