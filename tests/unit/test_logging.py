"""Unit tests for the structured logging configuration.

Verifies that ``configure_logging()`` produces well-formed output, that the
``retrieval_id_var`` context variable is propagated and that secrets are
redacted.
"""

from __future__ import annotations

import json
import logging
from io import StringIO
from typing import Any, Callable

import structlog

from page_retrieval.core.logging_config import configure_logging, retrieval_id_var


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _capture(log_level: str, emit: Callable[[], None]) -> str:
    """Configure logging, run ``emit`` and return what the root handler wrote."""
    configure_logging(log_level)

    buffer = StringIO()
    root = logging.getLogger()
    original_streams = []
    for handler in root.handlers:
        if hasattr(handler, "stream"):
            original_streams.append((handler, handler.stream))
            handler.stream = buffer

    emit()

    for handler, stream in original_streams:
        handler.flush()
        handler.stream = stream

    return buffer.getvalue()


def _records(output: str) -> list[dict[str, Any]]:
    return [json.loads(line) for line in output.strip().splitlines() if line.strip()]


def _find(output: str, event: str) -> dict[str, Any] | None:
    return next((r for r in _records(output) if r.get("event") == event), None)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestConfigureLoggingJson:
    def test_stdlib_records_are_json(self) -> None:
        output = _capture(
            "INFO", lambda: logging.getLogger("test.logging").info("stdlib_json")
        )
        record = _find(output, "stdlib_json")
        assert record is not None, f"No record in {output!r}"
        assert record["level"] == "info"
        assert "timestamp" in record
        assert record["logger"] == "test.logging"

    def test_structlog_records_are_json(self) -> None:
        output = _capture(
            "INFO",
            lambda: structlog.get_logger("test.logging").info("structlog_json", url="u"),
        )
        record = _find(output, "structlog_json")
        assert record is not None
        assert record["url"] == "u"

    def test_debug_suppressed_at_info(self) -> None:
        output = _capture(
            "INFO", lambda: logging.getLogger("test.logging").debug("hidden_debug")
        )
        assert "hidden_debug" not in output


class TestRetrievalIdContextVar:
    def test_retrieval_id_appears_in_output(self) -> None:
        token = retrieval_id_var.set("abc123")
        try:
            output = _capture(
                "INFO", lambda: logging.getLogger("test.logging").info("rid_test")
            )
        finally:
            retrieval_id_var.reset(token)

        record = _find(output, "rid_test")
        assert record is not None
        assert record["retrieval_id"] == "abc123"

    def test_absent_when_unset(self) -> None:
        output = _capture(
            "INFO", lambda: logging.getLogger("test.logging").info("no_rid_test")
        )
        record = _find(output, "no_rid_test")
        assert record is not None
        assert record.get("retrieval_id") is None


class TestRedaction:
    def test_secret_keys_are_redacted(self) -> None:
        output = _capture(
            "INFO",
            lambda: structlog.get_logger("test.logging").info(
                "redaction_test",
                cookie="session=abc",
                headers={"Authorization": "Bearer xyz", "accept": "text/html"},
            ),
        )
        record = _find(output, "redaction_test")
        assert record is not None
        assert record["cookie"] == "[REDACTED]"
        assert record["headers"]["Authorization"] == "[REDACTED]"
        assert record["headers"]["accept"] == "text/html"


class TestConfigureLoggingIdempotent:
    def test_calling_twice_keeps_one_handler(self) -> None:
        configure_logging("INFO")
        configure_logging("INFO")
        assert len(logging.getLogger().handlers) == 1
