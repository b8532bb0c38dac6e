"""CORS policy for the portfolio API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from portfolio.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated origin list, dropping blanks."""
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Register CORS for ``/api/*`` from ``CORS_ORIGINS``.

    A blank value or ``"*"`` opens the API to any origin; credentials are then
    disabled because browsers reject the wildcard with cookies. Clients may
    read the correlation header so that support requests can quote it.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
