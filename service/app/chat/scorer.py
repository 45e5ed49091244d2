"""Heuristic FAQ relevance scoring.

Additive point system over keyword hits, question containment (raw and
normalized) and word overlap. Two keyword schemes exist because the two
lookups want different things:

  - "per_hit": +10 per matching keyword. Used to pick the single best FAQ
    (threshold 30), where many keyword hits should win.
  - "flat": +30 once if any keyword matches, +15 for a shared solar topic.
    Used to gather up to five relevant FAQs as context (threshold 15),
    where recall matters more than ranking.

A query about installing software is vetoed to 0 so "how to install
antivirus" never matches the solar installation FAQs.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from app.chat.complexity import is_complex
from app.chat.normalizer import normalize
from app.knowledge.models import FAQ

KeywordScheme = Literal["per_hit", "flat"]

BEST_MATCH_THRESHOLD = 30
RELEVANT_THRESHOLD = 15
RELEVANT_LIMIT = 5

UNRELATED_INSTALL_TERMS = (
    "virus", "software", "program", "app", "application", "download",
    "computer", "laptop", "phone", "mobile", "system", "malware",
    "spyware", "adware", "trojan", "worm", "hack", "hacking",
)

SOLAR_TOPICS = (
    "panel", "battery", "grid", "energy", "power", "electricity",
    "cost", "price", "saving", "install", "roof", "hybrid", "sun",
    "solar", "kwh", "inverter", "net meter", "metering", "cell",
)


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    """An FAQ with its score for one query."""

    faq: FAQ
    score: int


def is_unrelated_install(query: str) -> bool:
    """True when "install" refers to software rather than solar panels."""
    query = query.lower()
    if "install" not in query or "installment" in query:
        return False
    return any(term in query for term in UNRELATED_INSTALL_TERMS)


def _contains_either_way(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def _overlap_points(normalized_query: str, normalized_question: str) -> int:
    query_words = {w for w in normalized_query.split() if len(w) > 3}
    faq_words = {w for w in normalized_question.split() if len(w) > 3}
    if not query_words or not faq_words:
        return 0

    shared = query_words & faq_words
    query_overlap = len(shared) / len(query_words)
    faq_overlap = len(shared) / len(faq_words)

    if query_overlap > 0.7 or faq_overlap > 0.7:
        return 30
    if query_overlap > 0.5 or faq_overlap > 0.5:
        return 20
    if query_overlap > 0.3 or faq_overlap > 0.3:
        return 10
    return 0


def score(raw_query: str, faq: FAQ, scheme: KeywordScheme = "per_hit") -> int:
    """Relevance of ``faq`` to ``raw_query``; always >= 0."""
    query = raw_query.lower().strip()
    if is_unrelated_install(query):
        return 0

    question = faq.question.lower().strip()
    points = 0

    hits = sum(1 for keyword in faq.keywords if keyword.lower() in query)
    if scheme == "flat":
        if hits:
            points += 30
        if any(topic in query and topic in question for topic in SOLAR_TOPICS):
            points += 15
    else:
        points += 10 * hits

    if query and query == question:
        points += 100
    elif _contains_either_way(query, question):
        points += 50

    normalized_query = normalize(raw_query)
    normalized_question = normalize(faq.question)
    if normalized_query and normalized_query == normalized_question:
        points += 80
    elif _contains_either_way(normalized_query, normalized_question):
        points += 40

    points += _overlap_points(normalized_query, normalized_question)
    return points


def rank(
    raw_query: str,
    faqs: Sequence[FAQ],
    scheme: KeywordScheme = "per_hit",
) -> list[ScoredCandidate]:
    """Score every FAQ, highest first. Ties keep knowledge-base order."""
    candidates = [ScoredCandidate(faq=faq, score=score(raw_query, faq, scheme)) for faq in faqs]
    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates


def find_best_faq(
    raw_query: str,
    faqs: Sequence[FAQ],
    threshold: int = BEST_MATCH_THRESHOLD,
) -> ScoredCandidate | None:
    """Single best FAQ for a simple query, or None.

    Complex queries and queries with nothing left after normalization are
    never matched locally.
    """
    if is_complex(raw_query) or not normalize(raw_query):
        return None

    ranked = rank(raw_query, faqs, "per_hit")
    if ranked and ranked[0].score >= threshold:
        return ranked[0]
    return None


def gather_relevant_faqs(
    raw_query: str,
    faqs: Sequence[FAQ],
    threshold: int = RELEVANT_THRESHOLD,
    limit: int = RELEVANT_LIMIT,
) -> list[ScoredCandidate]:
    """Up to ``limit`` FAQs scoring at least ``threshold`` under the flat scheme."""
    ranked = rank(raw_query, faqs, "flat")
    return [c for c in ranked if c.score >= threshold][:limit]
