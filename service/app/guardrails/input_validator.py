"""Input validation and basic prompt injection detection.

Applied before routing so nothing malformed or suspicious reaches the
completion provider. Raises HTTPException(400) so FastAPI returns a clean
error response.
"""

import re
from collections.abc import Sequence

from fastapi import HTTPException

from app.llm.completion import ChatTurn

# Heuristics only; a determined user can phrase around them.
_INJECTION_PATTERNS = [
    re.compile(r"ignore\s+(all\s+)?(previous|above|prior)\s+(instructions|prompts)", re.IGNORECASE),
    re.compile(r"you\s+are\s+now\s+(a|an)\s+", re.IGNORECASE),
    re.compile(r"^\s*system\s*:", re.IGNORECASE | re.MULTILINE),
    re.compile(r"<\s*/?\s*system\s*>", re.IGNORECASE),
]


def validate_message(message: str, max_length: int) -> str:
    """Validate an incoming chat message.

    Returns the stripped message on success.
    Raises HTTPException(400) on validation failure.
    """
    stripped = message.strip()

    if not stripped:
        raise HTTPException(status_code=400, detail="Message cannot be empty.")

    if len(stripped) > max_length:
        raise HTTPException(
            status_code=400,
            detail=f"Message exceeds maximum length of {max_length} characters.",
        )

    for pattern in _INJECTION_PATTERNS:
        if pattern.search(stripped):
            raise HTTPException(
                status_code=400,
                detail="Message rejected by input validation.",
            )

    return stripped


def validate_history(history: Sequence[ChatTurn], max_length: int) -> list[ChatTurn]:
    """Reject client-supplied system turns and oversized history entries.

    The system prompt is always built server-side. Assistant turns are not
    scanned for injection since they echo earlier replies.
    """
    validated: list[ChatTurn] = []
    for turn in history:
        if turn.role == "system":
            raise HTTPException(
                status_code=400,
                detail="History may only contain user and assistant turns.",
            )
        if len(turn.content) > max_length:
            raise HTTPException(
                status_code=400,
                detail=f"History entry exceeds maximum length of {max_length} characters.",
            )
        if turn.role == "user":
            for pattern in _INJECTION_PATTERNS:
                if pattern.search(turn.content):
                    raise HTTPException(
                        status_code=400,
                        detail="History rejected by input validation.",
                    )
        validated.append(turn)
    return validated
