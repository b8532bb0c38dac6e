"""API v1 blueprints."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

from .health import bp as health_bp  # noqa: E402

# (blueprint, url_prefix relative to /api/v1)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
]
