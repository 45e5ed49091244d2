"""Keyword-based intent classification for incoming chat messages.

One classification with four categories replaces the separate pricing
and solar-relatedness checks:

  - pricing: asks about prices, packages or payment
  - solar_related: mentions solar equipment or energy topics
  - off_topic: clearly about something else (food, travel, gadgets...)
  - ambiguous: no keyword fired either way

Ambiguous messages may be escalated to the completion provider by the
router; intent_from_provider_answer() parses that reply.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.chat.postprocess import strip_thinking
from app.errors import MalformedProviderOutput

PRICING = "pricing"
SOLAR_RELATED = "solar_related"
OFF_TOPIC = "off_topic"
AMBIGUOUS = "ambiguous"

PRICING_KEYWORDS = (
    "price", "pricing", "cost", "how much", "package", "packages",
    "how many", "quotation", "quote", "estimate", "budget", "affordable",
    "expensive", "cheap", "rates", "financing", "payment", "installment",
    "magkano",
)

SOLAR_KEYWORDS = (
    "solar", "panel", "pv", "photovoltaic", "sun", "renewable",
    "grid", "battery", "inverter", "roof", "electricity", "energy",
    "power", "dsolar", "d-solar", "net metering", "off-grid", "on-grid",
    "hybrid", "installation", "meralco", "kilowatt", "kw", "kwh", "watt",
)

NON_SOLAR_KEYWORDS = (
    "rice", "food", "grocery", "appliance", "car", "vehicle", "clothes",
    "shoes", "phone", "computer", "laptop", "tv", "television", "house",
    "condo", "rent", "apartment", "medicine", "doctor", "hospital",
    "restaurant", "hotel", "flight", "travel", "vacation",
)

# Checked in order; the first table with a hit decides the category.
_KEYWORD_TABLES: list[tuple[str, tuple[str, ...]]] = [
    (PRICING, PRICING_KEYWORDS),
    (SOLAR_RELATED, SOLAR_KEYWORDS),
    (OFF_TOPIC, NON_SOLAR_KEYWORDS),
]


@dataclass(frozen=True, slots=True)
class QueryIntent:
    """Intent category plus what decided it."""

    category: str  # "pricing", "solar_related", "off_topic" or "ambiguous"
    matched: str | None = None  # keyword that fired, if any
    decided_by: str = "keywords"  # "keywords", "provider" or "default"

    @property
    def is_pricing(self) -> bool:
        return self.category == PRICING

    @property
    def is_off_topic(self) -> bool:
        return self.category == OFF_TOPIC


def classify_intent(query: str) -> QueryIntent:
    lowered = query.lower()
    for category, keywords in _KEYWORD_TABLES:
        for keyword in keywords:
            if keyword in lowered:
                return QueryIntent(category=category, matched=keyword)
    return QueryIntent(category=AMBIGUOUS)


def intent_from_provider_answer(text: str) -> QueryIntent:
    """Parse the one-word classification answer from the completion provider.

    Raises MalformedProviderOutput if no known label appears.
    """
    answer = strip_thinking(text).lower()
    if "pricing" in answer:
        return QueryIntent(category=PRICING, decided_by="provider")
    if "solar" in answer:
        return QueryIntent(category=SOLAR_RELATED, decided_by="provider")
    if "other" in answer or "off" in answer:
        return QueryIntent(category=OFF_TOPIC, decided_by="provider")
    raise MalformedProviderOutput("Unrecognised intent label", raw=text)
