"""BigQuery chat logging for service analytics.

Best-effort: if the table isn't configured or the insert fails, we log
the error and move on. A failed analytics write should never break a
customer conversation.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

logger = logging.getLogger(__name__)


def build_chat_row(
    *,
    message: str,
    source: str,
    intent: str | None = None,
    faq_id: str | None = None,
    model_used: str = "",
    latency_ms: float = 0,
    status: str = "success",
    error_message: str | None = None,
) -> dict[str, Any]:
    return {
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "message": message[:1000],
        "source": source,
        "intent": intent,
        "faq_id": faq_id,
        "model_used": model_used,
        "latency_ms": round(latency_ms, 1),
        "status": status,
        "error_message": error_message[:1024] if error_message else None,
    }


def log_chat(
    table_id: str,
    *,
    message: str,
    source: str,
    intent: str | None = None,
    faq_id: str | None = None,
    model_used: str = "",
    latency_ms: float = 0,
    status: str = "success",
    error_message: str | None = None,
) -> None:
    """Insert a row into the chat_log BigQuery table.

    Silently skipped if table_id is empty (logging disabled).
    """
    if not table_id:
        return

    try:
        from google.cloud import bigquery

        bq_client = bigquery.Client()

        row = build_chat_row(
            message=message,
            source=source,
            intent=intent,
            faq_id=faq_id,
            model_used=model_used,
            latency_ms=latency_ms,
            status=status,
            error_message=error_message,
        )

        errors = bq_client.insert_rows_json(table_id, [row])
        if errors:
            logger.error("BigQuery insert errors: %s", errors)

    except Exception:
        logger.exception("Failed to log chat to BigQuery")
