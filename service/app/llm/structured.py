"""Parsing JSON-shaped replies from the completion provider.

Models asked for JSON still wrap it in code fences, prepend reasoning or
trail a sentence after the closing brace. We cut out the outermost
``{...}`` and validate it against a Pydantic schema. Anything that does
not survive that raises MalformedProviderOutput; callers decide the
fallback.
"""

from __future__ import annotations

import json
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from app.errors import MalformedProviderOutput

T = TypeVar("T", bound=BaseModel)

_THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>")


def extract_json_object(text: str) -> str:
    """The outermost ``{...}`` substring of ``text``."""
    cleaned = _THINK_BLOCK.sub("", text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise MalformedProviderOutput("No JSON object in provider output", raw=text)
    return cleaned[start : end + 1]


def parse_structured_output(text: str, schema: type[T]) -> T:
    """Validate provider output against ``schema``.

    Raises MalformedProviderOutput on missing, invalid or mismatched JSON.
    """
    payload = extract_json_object(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedProviderOutput(f"Invalid JSON: {exc}", raw=text) from exc

    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        raise MalformedProviderOutput(
            f"Provider output does not match {schema.__name__}: {exc}", raw=text
        ) from exc
