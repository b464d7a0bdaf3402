"""Tests for sensitive data filtering and JSON log formatting."""

from __future__ import annotations

import json
import logging
from io import StringIO

from app.core.config import LogSettings
from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    redact,
    set_request_id,
)


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_sensitive_filter_redacts_credentials():
    """Ensure passwords, tokens and cookies never reach the output."""

    logger, stream = _capture("test_redaction")

    logger.info(
        "auth_event",
        extra={
            "password": "hunter2-password",
            "session_token": "eyJhbGciOi.secret",
            "cookie": "portfolio_session=abc",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()

    assert "hunter2-password" not in output
    assert "eyJhbGciOi.secret" not in output
    assert "portfolio_session=abc" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_contact_details():
    """Ensure visitor emails and client addresses are redacted."""

    logger, stream = _capture("test_contact_redaction")

    logger.info(
        "contact_event",
        extra={
            "email": "visitor@example.com",
            "x-forwarded-for": "203.0.113.9",
            "message_chars": 42,
        },
    )

    output = stream.getvalue()

    assert "visitor@example.com" not in output
    assert "203.0.113.9" not in output
    assert "message_chars" in output


def test_sensitive_filter_allows_safe_fields():
    """Verify safe fields pass through unmodified."""

    logger, stream = _capture("test_safe_fields")

    logger.info(
        "safe_event",
        extra={
            "request_path": "/api/projects",
            "status_code": 201,
            "duration_ms": 150.5,
        },
    )

    payload = json.loads(stream.getvalue())

    assert payload["message"] == "safe_event"
    assert payload["request_path"] == "/api/projects"
    assert payload["status_code"] == 201
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts():
    """Ensure nested sensitive fields are redacted."""

    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "authorization": "Bearer secret-key",
                "user-agent": "pytest",
            },
            "items": [{"password": "p4ss"}, {"count": 5}],
        },
    )

    payload = json.loads(stream.getvalue())

    assert payload["headers"] == {"authorization": "[REDACTED]", "user-agent": "pytest"}
    assert payload["items"] == [{"password": "[REDACTED]"}, {"count": 5}]


def test_request_id_is_attached_from_context():
    logger, stream = _capture("test_request_id")

    set_request_id("req-123")
    try:
        logger.info("correlated_event")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-123"


def test_redact_keeps_sequence_types():
    value = redact(("a", {"token": "t"}), frozenset({"token"}))

    assert value == ("a", {"token": "[REDACTED]"})


def test_configure_logging_writes_rotating_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    configure_logging(LogSettings(output="file", file_path=str(log_file), level="INFO"))

    logging.getLogger("app.test").info("file_event", extra={"secret": "s"})
    for handler in logging.getLogger().handlers:
        handler.flush()

    line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "file_event"
    assert payload["secret"] == "[REDACTED]"

    configure_logging(LogSettings(level="WARNING"))
