"""Problem+JSON error responses for the portfolio API.

Every error leaving the API, whether raised by a view, produced by a service
``Failure`` or thrown by Flask, SQLAlchemy or marshmallow, is answered with an
``application/problem+json`` body::

    {"type": "about:blank", "title": "Not Found", "status": 404,
     "detail": "Project not found: ...", "instance": "/api/v1/projects/...",
     "code": "not_found", "request_id": "..."}

``code`` is the stable value clients switch on; ``detail`` is for humans.
Database driver messages never reach the body.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, has_request_context, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from portfolio.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Codes for statuses Werkzeug can raise on its own (routing, body parsing)
_CODES_BY_STATUS = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    422: "validation_error",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def http_status_to_code(status_code: int) -> str:
    """Error code for ``status_code``; ``"error"`` when it has none."""
    return _CODES_BY_STATUS.get(int(status_code), "error")


def as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the problem body for the current request.

    :param status: HTTP status; ``title`` is its standard phrase.
    :param code: Stable error code.
    :param message: Client-safe description, sent as ``detail``.
    :param details: Extra structured data such as field messages.
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if has_request_context() else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _respond(status: int, code: str, message: str, details: dict[str, Any] | None = None):
    body = jsonify(as_problem(status=status, code=code, message=message, details=details))
    body.mimetype = PROBLEM_MIMETYPE
    return body, int(status)


class APIError(Exception):
    """
    An error the API answers with a problem body.

    Subclasses only fix ``status_code``, ``code`` and the fallback message;
    services never raise these directly, their ``Failure`` results are turned
    into one at the edge.

    Parameters
    ----------
    message : str, optional
        Client-safe description. Defaults to the class's ``default_message``.
    status_code : int, optional
        Overrides the class status.
    code : str, optional
        Overrides the class error code.
    details : dict[str, Any] | None, optional
        Structured payload such as per-field validation messages.
    """

    status_code: int = HTTPStatus.BAD_REQUEST
    code: str = "bad_request"
    default_message: str = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = int(status_code if status_code is not None else type(self).status_code)
        self.code = code or type(self).code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        return as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class BadRequest(APIError):
    """Malformed input outside schema validation (unreadable token, bad id)."""


class Unauthorized(APIError):
    status_code = HTTPStatus.UNAUTHORIZED
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(APIError):
    """The caller is known but does not own the resource."""

    status_code = HTTPStatus.FORBIDDEN
    code = "forbidden"
    default_message = "Forbidden"


class NotFound(APIError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


class Conflict(APIError):
    """Duplicate email or username, or another unique key collision."""

    status_code = HTTPStatus.CONFLICT
    code = "conflict"
    default_message = "Conflict"


class UnprocessableEntity(APIError):
    """Payload rejected by a marshmallow schema; field messages go in ``details``."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "validation_error"
    default_message = "Validation failed"


class InternalError(APIError):
    """Missing signing key or a write the store could not complete."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    code = "internal_server_error"
    default_message = "Internal server error"


def init_app(app: Flask) -> None:
    """
    Register the problem+JSON handlers on ``app``.

    4xx answers are logged as warnings, 5xx as errors. Unexpected exceptions
    and database errors keep their traceback in the log and are answered
    with a generic message.
    """

    def _log(status: int, kind: str, code: str, message: str, *, exc_info: bool = False) -> None:
        level = logging.ERROR if status >= 500 else logging.WARNING
        log.log(level, "%s code=%s status=%s detail=%s", kind, code, status, message, exc_info=exc_info)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError) -> tuple[Response, int]:
        _log(err.status_code, "api_error", err.code, err.message)
        body = jsonify(err.to_problem())
        body.mimetype = PROBLEM_MIMETYPE
        return body, err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = http_status_to_code(status)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        _log(status, "http_error", code, message)
        return _respond(status, code, message)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        _log(HTTPStatus.UNPROCESSABLE_ENTITY, "validation_error", "validation_error", request.path)
        return _respond(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            {"errors": err.normalized_messages()},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _log(HTTPStatus.CONFLICT, "integrity_error", "conflict", type(err.orig).__name__, exc_info=True)
        return _respond(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        _log(HTTPStatus.SERVICE_UNAVAILABLE, "db_unavailable", "service_unavailable", "", exc_info=True)
        return _respond(HTTPStatus.SERVICE_UNAVAILABLE, "service_unavailable", "Service temporarily unavailable")

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        _log(HTTPStatus.INTERNAL_SERVER_ERROR, "unhandled", "internal_server_error", type(err).__name__, exc_info=True)
        return _respond(HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error")
