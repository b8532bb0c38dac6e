"""Request ids and JSON log lines."""

from __future__ import annotations

import json
import logging

from portfolio.core.logger import REQUEST_ID_HEADER, JSONFormatter, configure_logging


def test_incoming_request_id_is_echoed(app):
    resp = app.test_client().get("/api/v1/health", headers={REQUEST_ID_HEADER: "req-123"})
    assert resp.headers[REQUEST_ID_HEADER] == "req-123"


def test_correlation_header_is_accepted(app):
    resp = app.test_client().get("/api/v1/health", headers={"X-Correlation-ID": "corr-9"})
    assert resp.headers[REQUEST_ID_HEADER] == "corr-9"


def test_request_id_generated_when_absent(app):
    resp = app.test_client().get("/api/v1/health")
    assert len(resp.headers[REQUEST_ID_HEADER]) == 36


def test_each_request_gets_its_own_id_inside_a_shared_app_context(app):
    client = app.test_client()
    with app.app_context():
        first = client.get("/api/v1/health", headers={REQUEST_ID_HEADER: "req-1"})
        second = client.get("/api/v1/health", headers={REQUEST_ID_HEADER: "req-2"})
        third = client.get("/api/v1/health")

    assert first.headers[REQUEST_ID_HEADER] == "req-1"
    assert second.headers[REQUEST_ID_HEADER] == "req-2"
    assert third.headers[REQUEST_ID_HEADER] not in {"req-1", "req-2"}


def test_problem_body_quotes_request_id(app):
    resp = app.test_client().get("/api/v1/missing", headers={REQUEST_ID_HEADER: "req-404"})
    assert resp.get_json()["request_id"] == "req-404"


def test_json_formatter_includes_context():
    record = logging.LogRecord(
        "portfolio.tokens", logging.INFO, __file__, 1, "token.issued user_id=%s", ("u1",), None
    )
    record.user_id = "u1"
    record.request_id = None

    entry = json.loads(JSONFormatter().format(record))

    assert entry["msg"] == "token.issued user_id=u1"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "portfolio.tokens"
    assert entry["user_id"] == "u1"
    assert "elapsed_ms" not in entry


def test_configure_logging_unknown_level_falls_back_to_info():
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        configure_logging("chatty", fmt="text")
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)
