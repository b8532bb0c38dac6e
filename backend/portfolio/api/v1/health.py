"""Liveness and database health."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from portfolio.core.container import get_services
from portfolio.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
def healthcheck():
    """Report database reachability, token configuration and build info.

    Answers 503 when the database check fails.
    """

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    tokens_status = "ok" if get_services().tokens.settings.is_configured else "unconfigured"
    payload = {
        "status": "ok" if db_status == "ok" else "degraded",
        "db": db_status,
        "tokens": tokens_status,
        "version": current_app.config.get("APP_VERSION", "dev"),
        "commit": current_app.config.get("APP_COMMIT", "unknown"),
    }
    return jsonify(payload), 200 if db_status == "ok" else 503
