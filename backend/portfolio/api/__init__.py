"""HTTP surface: versioned blueprint registration."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` under ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself.
    """

    base = base_prefix.strip("/")
    for bp, rel_prefix in entries:
        segments = [s for s in (base, rel_prefix.strip("/")) if s]
        app.register_blueprint(bp, url_prefix="/" + "/".join(segments))


def init_app(app: Flask) -> None:
    api_base = app.config.get("API_BASE_PREFIX", "/api")

    from portfolio.api.v1 import API_VERSION as V1
    from portfolio.api.v1 import REGISTRY as V1_REGISTRY

    register_blueprint_group(app, base_prefix=f"{api_base}/{V1}", entries=V1_REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]
