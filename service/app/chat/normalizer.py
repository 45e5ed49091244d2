"""Free-text normalization shared by the FAQ scorer.

Lowercases, turns punctuation into spaces, drops a leading question word
and common filler words so "What is the payback period?" and "payback
period" compare equal. Passes repeat until the text stops changing, which
keeps normalize() idempotent.
"""

from __future__ import annotations

import re

_PUNCTUATION = re.compile(r"[?!.,;:\-'\"]")
_WHITESPACE = re.compile(r"\s+")
_LEADING_QUESTION_WORD = re.compile(
    r"^(what|how|when|where|why|can|do|does|is|are|will)\s+"
)
_FILLER = re.compile(
    r"\s+(a|an|the|to|for|in|on|with|of|about|please|tell me|i want to know)\s+"
)


def _normalize_once(text: str) -> str:
    text = _PUNCTUATION.sub(" ", text.lower())
    text = _WHITESPACE.sub(" ", text).strip()
    text = _LEADING_QUESTION_WORD.sub("", text, count=1)
    text = _FILLER.sub(" ", text)
    return text.strip()


def normalize(text: str) -> str:
    """Normalize ``text`` for comparison. May return an empty string."""
    current = _normalize_once(text)
    while True:
        following = _normalize_once(current)
        if following == current:
            return current
        current = following
