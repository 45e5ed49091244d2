"""Chat router: decides where the answer to a message comes from.

A linear decision chain, cheapest first:

  1. package code in the message     → formatted package info ("package")
  2. "packages" catalogue request    → grouped price list ("package")
  3. software-install question       → fixed redirect ("rejected")
  4. simple, on-topic question that restates an FAQ → FAQ answer ("faq")
  5. provider picks a confident FAQ match           → FAQ answer ("faq")
  6. provider generates an answer with FAQ context  → "llm", or "faq" when
     the text closely repeats a supplied FAQ

Provider calls happen at most three times per message (ambiguous-intent
escalation, FAQ confidence, generation) and every failure degrades to a
safe answer instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from app.chat import prompts
from app.chat.complexity import is_complex
from app.chat.intent import (
    AMBIGUOUS,
    SOLAR_RELATED,
    QueryIntent,
    classify_intent,
    intent_from_provider_answer,
)
from app.chat.packages import (
    PACKAGE_PREFIX,
    find_package,
    format_package,
    format_package_catalogue,
    is_catalogue_request,
)
from app.chat.postprocess import attribute_source, decorate, strip_citations, strip_thinking
from app.chat.scorer import (
    BEST_MATCH_THRESHOLD,
    RELEVANT_LIMIT,
    RELEVANT_THRESHOLD,
    ScoredCandidate,
    find_best_faq,
    gather_relevant_faqs,
)
from app.errors import MalformedProviderOutput, ProviderFailure
from app.knowledge.models import FAQ
from app.knowledge.store import KnowledgeBase
from app.llm.completion import ChatTurn, CompletionProvider
from app.llm.structured import parse_structured_output

logger = logging.getLogger(__name__)

# Used as LLM context when nothing scores as relevant.
GENERAL_FAQ_IDS = ("savings", "system-difference", "packages")
_GENERAL_FAQ_LIMIT = 2

# The cheap pre-check uses a shorter list than the scorer veto so that
# "install a solar system" still reaches the FAQ path.
_REJECT_INSTALL_TERMS = ("virus", "malware", "software", "hack", "computer", "laptop", "phone")


@dataclass(frozen=True, slots=True)
class ChatResult:
    """The answer to one message and where it came from."""

    text: str
    source: str  # "package", "faq", "llm", "rejected" or "error"
    is_pricing_query: bool = False
    intent: str | None = None
    faq_id: str | None = None


class FaqMatchVerdict(BaseModel):
    """Structured reply of the FAQ confidence matcher."""

    model_config = ConfigDict(populate_by_name=True)

    can_answer: bool = Field(default=False, alias="canAnswer")
    best_faq_id: str | None = Field(default=None, alias="bestFaqId")
    confidence: float = 0.0
    reason: str = ""


def is_unrelated_install_request(message: str) -> bool:
    lowered = message.lower()
    if "install" not in lowered or "installment" in lowered:
        return False
    return any(term in lowered for term in _REJECT_INSTALL_TERMS)


def general_faqs(faqs: Sequence[FAQ]) -> list[FAQ]:
    return [faq for faq in faqs if faq.id in GENERAL_FAQ_IDS][:_GENERAL_FAQ_LIMIT]


class ChatRouter:
    """Route a chat message to packages, FAQs or the completion provider."""

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        completion: CompletionProvider,
        *,
        best_match_threshold: int = BEST_MATCH_THRESHOLD,
        relevant_faq_threshold: int = RELEVANT_THRESHOLD,
        relevant_faq_limit: int = RELEVANT_LIMIT,
        local_answer_min_score: int = 100,
        faq_confidence_threshold: float = 0.7,
        faq_confidence_enabled: bool = True,
        escalate_ambiguous_intent: bool = True,
        emoji_enabled: bool = True,
        max_history_turns: int = 10,
    ) -> None:
        self._knowledge_base = knowledge_base
        self._completion = completion
        self._best_match_threshold = best_match_threshold
        self._relevant_faq_threshold = relevant_faq_threshold
        self._relevant_faq_limit = relevant_faq_limit
        self._local_answer_min_score = local_answer_min_score
        self._faq_confidence_threshold = faq_confidence_threshold
        self._faq_confidence_enabled = faq_confidence_enabled
        self._escalate_ambiguous_intent = escalate_ambiguous_intent
        self._emoji_enabled = emoji_enabled
        self._max_history_turns = max_history_turns

    async def route(self, message: str, history: Sequence[ChatTurn] = ()) -> ChatResult:
        package = await find_package(message, self._knowledge_base)
        if package is not None:
            logger.info("Answered with package %s", package.code)
            return ChatResult(text=PACKAGE_PREFIX + format_package(package), source="package")

        if is_catalogue_request(message):
            packages = await self._knowledge_base.list_packages()
            return ChatResult(text=format_package_catalogue(packages), source="package")

        if is_unrelated_install_request(message):
            logger.info("Rejected off-topic install request")
            return ChatResult(text=prompts.OFF_TOPIC_REDIRECT, source="rejected")

        intent = await self._resolve_intent(message)
        complex_query = is_complex(message)

        faqs = await self._knowledge_base.list_faqs()
        relevant = gather_relevant_faqs(
            message,
            faqs,
            threshold=self._relevant_faq_threshold,
            limit=self._relevant_faq_limit,
        )

        if not complex_query and not intent.is_off_topic:
            local = find_best_faq(message, faqs, threshold=self._best_match_threshold)
            if local is not None and local.score >= self._local_answer_min_score:
                logger.info("Answered locally with FAQ %s (score=%d)", local.faq.id, local.score)
                return self._faq_result(local.faq, intent)

            if relevant and self._faq_confidence_enabled:
                matched = await self._match_faq_with_provider(message, relevant)
                if matched is not None:
                    return self._faq_result(matched, intent)

        context = [candidate.faq for candidate in relevant] or general_faqs(faqs)
        return await self._generate(message, history, context, intent)

    async def _resolve_intent(self, message: str) -> QueryIntent:
        """Keyword intent, escalated to the provider when ambiguous."""
        intent = classify_intent(message)
        if intent.category != AMBIGUOUS or not self._escalate_ambiguous_intent:
            return intent

        turns = [
            ChatTurn(role="system", content=prompts.INTENT_CLASSIFIER_SYSTEM_PROMPT),
            ChatTurn(role="user", content=prompts.build_intent_prompt(message)),
        ]
        try:
            answer = await self._completion.complete(turns, temperature=0.1, max_tokens=200)
            return intent_from_provider_answer(answer)
        except (ProviderFailure, MalformedProviderOutput) as exc:
            logger.warning("Intent escalation failed, assuming solar-related: %s", exc)
            return QueryIntent(category=SOLAR_RELATED, decided_by="default")

    async def _match_faq_with_provider(
        self, message: str, candidates: Sequence[ScoredCandidate]
    ) -> FAQ | None:
        """Ask the provider whether one candidate FAQ answers the message outright."""
        faqs = [candidate.faq for candidate in candidates]
        turns = [
            ChatTurn(role="system", content=prompts.FAQ_MATCHER_SYSTEM_PROMPT),
            ChatTurn(role="user", content=prompts.build_faq_match_prompt(message, faqs)),
        ]
        try:
            raw = await self._completion.complete(
                turns, temperature=0.1, max_tokens=600, json_output=True
            )
            verdict = parse_structured_output(raw, FaqMatchVerdict)
        except ProviderFailure as exc:
            logger.warning("FAQ confidence check failed: %s", exc)
            return None
        except MalformedProviderOutput as exc:
            logger.warning("FAQ confidence reply was not valid JSON: %s", exc)
            verdict = FaqMatchVerdict()

        if not verdict.can_answer or verdict.confidence < self._faq_confidence_threshold:
            return None

        for faq in faqs:
            if faq.id == verdict.best_faq_id:
                logger.info(
                    "Provider matched FAQ %s (confidence=%.2f)", faq.id, verdict.confidence
                )
                return faq
        return None

    async def _generate(
        self,
        message: str,
        history: Sequence[ChatTurn],
        context: Sequence[FAQ],
        intent: QueryIntent,
    ) -> ChatResult:
        recent = list(history)[-self._max_history_turns:] if self._max_history_turns else []
        turns = [
            ChatTurn(role="system", content=prompts.build_system_prompt(context)),
            *recent,
            ChatTurn(role="user", content=message),
        ]
        try:
            raw = await self._completion.complete(turns, temperature=0.7, max_tokens=475)
        except ProviderFailure:
            logger.exception("Completion provider failed while generating an answer")
            return ChatResult(
                text=prompts.APOLOGY,
                source="error",
                is_pricing_query=intent.is_pricing,
                intent=intent.category,
            )

        text = strip_thinking(raw) or prompts.EMPTY_RESPONSE
        matched = attribute_source(text, context)
        if matched is None:
            return ChatResult(
                text=text,
                source="llm",
                is_pricing_query=intent.is_pricing,
                intent=intent.category,
            )

        if self._emoji_enabled:
            text = decorate(text, matched.id)
        return ChatResult(
            text=text,
            source="faq",
            is_pricing_query=intent.is_pricing,
            intent=intent.category,
            faq_id=matched.id,
        )

    def _faq_result(self, faq: FAQ, intent: QueryIntent) -> ChatResult:
        text = strip_citations(faq.answer)
        if self._emoji_enabled:
            text = decorate(text, faq.id)
        return ChatResult(
            text=text,
            source="faq",
            is_pricing_query=intent.is_pricing,
            intent=intent.category,
            faq_id=faq.id,
        )
