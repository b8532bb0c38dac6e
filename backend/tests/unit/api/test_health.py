"""Health endpoint."""

from __future__ import annotations

from types import SimpleNamespace

from sqlalchemy.exc import OperationalError

from portfolio.api.v1 import health


def test_health_ok(app):
    resp = app.test_client().get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["tokens"] == "ok"
    assert "version" in body


def test_health_degraded_when_db_fails(app, monkeypatch):
    def _boom(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("down"))

    monkeypatch.setattr(health, "db", SimpleNamespace(session=SimpleNamespace(execute=_boom)))

    resp = app.test_client().get("/api/v1/health")

    assert resp.status_code == 503
    body = resp.get_json()
    assert body["db"] == "fail"
    assert body["status"] == "degraded"


def test_unknown_route_is_problem_json(app):
    resp = app.test_client().get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "not_found"
