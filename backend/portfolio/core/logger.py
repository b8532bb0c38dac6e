"""Logging setup: JSON or plain-text lines tagged with a request id.

Every record handled by the root handler carries ``request_id``. Inside a
request it comes from ``X-Request-ID`` (or ``X-Correlation-ID``) when the
client sends one, otherwise a fresh UUID is minted and echoed back on the
response. Outside a request it is ``None``.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INCOMING_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")
MAX_REQUEST_ID_LENGTH = 128

# ``extra=`` keys copied into JSON output
CONTEXT_KEYS = ("user_id", "entity", "operation", "method", "path", "status", "endpoint", "elapsed_ms")

# Libraries that are chatty at INFO
QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(request_id)s] %(message)s"

access_log = logging.getLogger("portfolio.access")


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        entry.update({key: getattr(record, key) for key in CONTEXT_KEYS if hasattr(record, key)})
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """Return the id of the current request, assigning one on first use.

    Outside a request context a throwaway UUID is returned.
    """
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current:
        return current
    incoming = next(
        (v.strip() for h in INCOMING_ID_HEADERS if (v := request.headers.get(h, "")).strip()),
        None,
    )
    g.request_id = incoming[:MAX_REQUEST_ID_LENGTH] if incoming else str(uuid4())
    return g.request_id


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int = "INFO", fmt: str = "json") -> None:
    """Install a single stdout handler on the root logger.

    :param level: Root level name or number; unknown names fall back to INFO.
    :param fmt: ``"json"`` for structured lines, anything else for plain text.
    """
    handler = logging.StreamHandler(sys.stdout)
    if fmt.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root_level = _resolve_level(level)
    root.setLevel(root_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))


def init_app(app: Flask) -> None:
    """Tag requests with an id and, if ``LOG_REQUESTS`` is set, log one access line each."""
    app.logger.addFilter(RequestIdFilter())
    log_requests = bool(app.config.get("LOG_REQUESTS", True))

    @app.before_request
    def _start_request() -> None:
        # ``g`` outlives the request when an app context was already pushed
        g.pop("request_id", None)
        ensure_request_id()
        g.request_started = time.perf_counter()

    @app.after_request
    def _finish_request(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        if log_requests:
            started = g.get("request_started")
            elapsed = (time.perf_counter() - started) * 1000 if started else None
            access_log.info(
                "%s %s %s",
                request.method,
                request.path,
                response.status_code,
                extra={
                    "method": request.method,
                    "path": request.path,
                    "status": response.status_code,
                    "elapsed_ms": round(elapsed, 2) if elapsed is not None else None,
                },
            )
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
