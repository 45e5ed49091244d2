"""Prompt text sent to the completion provider."""

from __future__ import annotations

from collections.abc import Sequence

from app.knowledge.models import FAQ

_BASE_SYSTEM_PROMPT = """\
You are D-Solar's friendly AI solar expert. You represent D-Solar Philippines, \
premier solar provider in Metro Manila. Keep responses brief with emojis.

OUR SERVICES:
- Professional solar design & installation
- Energy consultation & ROI calculation
- System monitoring & maintenance

VALUE:
- 50-70% lower electricity bills
- 25-year equipment warranty
- 3-5 year ROI
- Contact: +63960-471-6968"""

_INSTRUCTIONS = """\
INSTRUCTIONS:
1. If query is NOT solar-related, politely redirect to solar topics
2. For solar queries, use KNOWLEDGE BASE FAQs if relevant
3. Keep responses under 2 sentences with emojis
4. Be friendly, professional and concise"""

FAQ_MATCHER_SYSTEM_PROMPT = (
    "You are a precise FAQ matching system that outputs only valid JSON."
)

INTENT_CLASSIFIER_SYSTEM_PROMPT = (
    "You are a classifier for a solar energy company's chat. You decide whether a "
    "message asks about solar pricing or packages, about solar energy in general, "
    "or about something unrelated."
)

OFF_TOPIC_REDIRECT = (
    "🌞 I'm sorry, but I can't assist with that. I'm specialized in solar energy "
    "solutions. Let me know how I can help you with solar panels, installations, "
    "financing, or energy savings!"
)

APOLOGY = "Sorry, I encountered an error. Please try again later."

EMPTY_RESPONSE = "Sorry, I could not generate a response."


def format_faq_context(faqs: Sequence[FAQ]) -> str:
    """Knowledge-base block appended to the system prompt."""
    if not faqs:
        return ""
    blocks = [
        f"FAQ {index}:\nQ: {faq.question}\nA: {faq.answer}\nID: {faq.id}"
        for index, faq in enumerate(faqs, start=1)
    ]
    return "KNOWLEDGE BASE FAQs:\n\n" + "\n\n".join(blocks)


def build_system_prompt(faqs: Sequence[FAQ]) -> str:
    parts = [_BASE_SYSTEM_PROMPT]
    context = format_faq_context(faqs)
    if context:
        parts.append(context)
    parts.append(_INSTRUCTIONS)
    return "\n\n".join(parts)


def build_faq_match_prompt(query: str, faqs: Sequence[FAQ]) -> str:
    """Ask the provider which FAQ, if any, answers ``query`` directly."""
    faq_context = "\n\n".join(
        f"FAQ {index}:\nID: {faq.id}\nQ: {faq.question}\nA: {faq.answer}"
        for index, faq in enumerate(faqs, start=1)
    )
    return f"""\
You are an FAQ matcher for D-Solar, a solar energy company. Your task is to \
determine if a user's question can be directly answered using one of our FAQs.

Here are our FAQs:
{faq_context}

User Question: "{query}"

First, analyze if the user's question can be directly answered by one of the FAQs above.
Then respond in JSON format with the following fields:
- canAnswer: true if one of the FAQs directly answers the user's question, false otherwise
- bestFaqId: the ID of the most relevant FAQ (only if canAnswer is true)
- confidence: a number between 0 and 1 representing how confident you are in this match
- reason: a brief explanation of your decision

Respond with valid JSON only."""


def build_intent_prompt(query: str) -> str:
    return (
        "Classify the following message. Answer with exactly one word: "
        '"pricing" if it asks about solar prices, packages or payment; '
        '"solar" if it is about solar energy or solar systems otherwise; '
        '"other" if it is unrelated to solar.\n\n'
        f'Message: "{query}"'
    )
