"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from ficom.core.logger import JSONFormatter, configure_logging, ensure_request_id


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    # Act
    configure_logging("DEBUG")

    # Assert
    assert logging.getLogger().level == logging.DEBUG
    configure_logging("WARNING")


def test_json_formatter_includes_auth_extras() -> None:
    record = logging.LogRecord("ficom.auth", logging.INFO, __file__, 1, "auth.login_failed", None, None)
    record.reason = "invalid_credentials"
    record.user_id = 7

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "auth.login_failed"
    assert payload["level"] == "INFO"
    assert payload["reason"] == "invalid_credentials"
    assert payload["user_id"] == 7
    assert payload["request_id"] is None


def test_request_id_echoes_incoming_header(app) -> None:
    with app.test_request_context(headers={"X-Request-ID": "req-123"}):
        assert ensure_request_id() == "req-123"


def test_request_id_generated_once_per_request(app) -> None:
    with app.test_request_context():
        first = ensure_request_id()
        assert first
        assert ensure_request_id() == first


def test_response_carries_request_id_header(client) -> None:
    resp = client.get("/api/v1/health", headers={"X-Correlation-ID": "corr-9"})
    assert resp.headers["X-Request-ID"] == "corr-9"


def test_request_id_is_not_reused_across_requests(client) -> None:
    first = client.get("/api/v1/health", headers={"X-Request-ID": "first-1"})
    second = client.get("/api/v1/health", headers={"X-Correlation-ID": "second-2"})
    third = client.get("/api/v1/health")

    assert first.headers["X-Request-ID"] == "first-1"
    assert second.headers["X-Request-ID"] == "second-2"
    assert third.headers["X-Request-ID"] not in {"first-1", "second-2"}


def test_request_contexts_sharing_an_app_context_get_own_ids(app) -> None:
    with app.app_context():
        with app.test_request_context(headers={"X-Request-ID": "one"}):
            assert ensure_request_id() == "one"
        with app.test_request_context(headers={"X-Request-ID": "two"}):
            assert ensure_request_id() == "two"
