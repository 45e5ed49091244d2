"""Complexity check: should a query skip local FAQ matching?

Long, multi-part, comparative or personalised questions rarely have a
canned FAQ answer, so they go to the completion provider instead. No LLM
call, deterministic and cheap.
"""

from __future__ import annotations

import re

_MAX_LENGTH = 100
_MAX_SIGNIFICANT_WORDS = 8

COMMON_WORDS = frozenset({
    "what", "how", "why", "where", "when", "who", "which", "will", "can",
    "is", "are", "do", "does", "did", "has", "have", "had", "was", "were",
    "the", "a", "an", "this", "that", "these", "those", "it", "they", "you",
    "i", "we", "he", "she", "them", "and", "but", "or", "if", "so",
    "yes", "no", "ok", "okay",
})

# (signal name, pattern)
_COMPLEX_SIGNALS: list[tuple[str, re.Pattern[str]]] = [
    ("comparison", re.compile(
        r"compare|difference between|\bvs\b\.?|versus|or (\w+) better|better (\w+) or", re.I)),
    ("personal_scenario", re.compile(
        r"my (house|home|roof|bill|situation|specific|case|scenario)", re.I)),
    ("cost_benefit", re.compile(
        r"\broi\b|return on investment|worth it|good investment|cost (savings|benefit)", re.I)),
    ("multi_part", re.compile(
        r"and (also|additionally)|as well as|plus can you|also tell me|several questions", re.I)),
    ("numeric_unit", re.compile(
        r"\d+ (kw|kwh|square meters|sqm|php|₱|pesos|percent|%)", re.I)),
    ("calculation", re.compile(
        r"calculate|compute|estimate|computation|formula", re.I)),
    ("hypothetical", re.compile(
        r"what if|in case|scenario where|assuming|suppose|hypothetically", re.I)),
    ("advice", re.compile(
        r"recommend|advice|suggestion|should i|best for me|good for my", re.I)),
]


def significant_words(query: str) -> list[str]:
    """Whitespace-split words that are not stopwords and longer than two chars."""
    return [
        word
        for word in query.lower().split()
        if word not in COMMON_WORDS and len(word) > 2
    ]


def complexity_signals(query: str) -> list[str]:
    """Names of every complexity signal that fires for ``query``."""
    signals: list[str] = []
    if len(query) > _MAX_LENGTH:
        signals.append("long")
    if len(significant_words(query)) > _MAX_SIGNIFICANT_WORDS:
        signals.append("many_words")
    for name, pattern in _COMPLEX_SIGNALS:
        if pattern.search(query):
            signals.append(name)
    if query.count("?") > 1:
        signals.append("multiple_questions")
    return signals


def is_complex(query: str) -> bool:
    return bool(complexity_signals(query))
