"""Tests for best-effort BigQuery chat logging."""

from unittest.mock import MagicMock, patch

from app.observability.logger import build_chat_row, log_chat


class TestBuildChatRow:
    def test_truncates_long_fields(self) -> None:
        row = build_chat_row(
            message="x" * 5000,
            source="error",
            error_message="e" * 5000,
            latency_ms=12.345,
        )
        assert len(row["message"]) == 1000
        assert len(row["error_message"]) == 1024
        assert row["latency_ms"] == 12.3
        assert row["status"] == "success"


class TestLogChat:
    @patch("google.cloud.bigquery.Client")
    def test_disabled_when_table_empty(self, mock_client: MagicMock) -> None:
        log_chat("", message="hi", source="llm")
        mock_client.assert_not_called()

    @patch("google.cloud.bigquery.Client")
    def test_inserts_row(self, mock_client: MagicMock) -> None:
        mock_client.return_value.insert_rows_json.return_value = []

        log_chat("proj.ds.chat_log", message="hi", source="faq", faq_id="warranty")

        table, rows = mock_client.return_value.insert_rows_json.call_args.args
        assert table == "proj.ds.chat_log"
        assert rows[0]["faq_id"] == "warranty"
        assert rows[0]["source"] == "faq"

    @patch("google.cloud.bigquery.Client")
    def test_failure_never_raises(self, mock_client: MagicMock) -> None:
        mock_client.side_effect = RuntimeError("no credentials")
        log_chat("proj.ds.chat_log", message="hi", source="llm")
