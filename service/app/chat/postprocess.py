"""Clean-up and attribution for text coming back from the completion provider.

Reasoning models leak their chain of thought (``<think>`` blocks, "Let me
think..." lines); those are stripped before the user sees anything. A
generated answer that closely repeats one of the FAQs we supplied is
re-tagged as FAQ-sourced so the chat widget can badge it.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from app.knowledge.models import FAQ

DEFAULT_EMOJI = "🌞 "

FAQ_EMOJIS: dict[str, str] = {
    "installment-plans": "💳 ",
    "how-to-avail": "📄 ",
    "quotation": "📊 ",
    "savings": "💰 ",
    "zero-bill": "0️⃣ ",
    "location": "📍 ",
    "system-difference": "⚡ ",
    "cost": "💵 ",
    "night-operation": "🌙 ",
    "power-outage": "⚠️ ",
    "cloudy-days": "☁️ ",
    "maintenance": "🛠️ ",
    "free-maintenance": "🆓 ",
    "lifespan": "⏱️ ",
    "warranty": "🔒 ",
    "installation-time": "⏰ ",
    "permits": "📋 ",
    "roof-damage": "🏠 ",
    "roof-space": "📏 ",
    "panel-size": "📐 ",
    "add-panels": "➕ ",
    "monitoring": "📱 ",
    "component-replacement": "🔄 ",
    "net-metering": "🔌 ",
    "payback": "💸 ",
    "battery-need": "🔋 ",
    "space-requirements": "🏡 ",
    "service-locations": "🗺️ ",
    "brands-used": "🏭 ",
}

_THINKING_PATTERNS = [
    re.compile(r"<think>[\s\S]*?</think>"),
    re.compile(r"^<think>.*$", re.M),
    re.compile(r"^Think(ing)?:.*$", re.M),
    re.compile(
        r"^(Let me|I need to|I will|Let's|I'm going to|First,|Alright,|Okay,) "
        r".*(answer|think|provide|consider|explain).*",
        re.M,
    ),
    re.compile(
        r"^(The user asked|In response to|To answer|I should|I need to|I will|Let me"
        r"|First,|Next,|Finally,|Based on|According to|Looking at).*",
        re.M,
    ),
]

_CITATION = re.compile(r"\[Source:.*?\]")
_LEADING_EMOJI = re.compile(
    "^[\U0001F300-\U0001F6FF\U0001F900-\U0001F9FF\u2600-\u26FF\u2700-\u27BF]"
)
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WHITESPACE = re.compile(r"\s+")

_ATTRIBUTION_PREFIX = 30


def strip_thinking(text: str) -> str:
    """Remove reasoning narration and collapse the remaining lines."""
    for pattern in _THINKING_PATTERNS:
        text = pattern.sub("", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line).strip()


def strip_citations(text: str) -> str:
    """Drop literal ``[Source: ...]`` markers from an FAQ answer."""
    return _CITATION.sub("", text).strip()


def starts_with_emoji(text: str) -> bool:
    return bool(_LEADING_EMOJI.match(text))


def decorate(text: str, faq_id: str | None = None) -> str:
    """Prefix the topic emoji for ``faq_id`` unless the text already has one."""
    if starts_with_emoji(text):
        return text
    return FAQ_EMOJIS.get(faq_id or "", DEFAULT_EMOJI) + text


def _comparable(text: str) -> str:
    return _WHITESPACE.sub(" ", _NON_ALNUM.sub(" ", text.lower())).strip()


def attribute_source(response: str, faqs: Sequence[FAQ]) -> FAQ | None:
    """The first FAQ whose answer overlaps ``response`` on a 30-char prefix."""
    normalized_response = _comparable(response)
    if len(normalized_response) < _ATTRIBUTION_PREFIX:
        return None

    for faq in faqs:
        normalized_answer = _comparable(faq.answer)
        if len(normalized_answer) < _ATTRIBUTION_PREFIX:
            continue
        if (
            normalized_answer[:_ATTRIBUTION_PREFIX] in normalized_response
            or normalized_response[:_ATTRIBUTION_PREFIX] in normalized_answer
        ):
            return faq
    return None
