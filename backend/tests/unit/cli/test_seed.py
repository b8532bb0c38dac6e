"""``flask seed roles``."""

from __future__ import annotations

from portfolio.cli.seed import ADMIN_ROLE, seed_cli, seed_roles
from portfolio.models import Role


def test_seed_roles_is_idempotent(app, session):
    with app.app_context():
        first = seed_roles(["User", ADMIN_ROLE])
        second = seed_roles(["User", ADMIN_ROLE])

    assert first == {"roles": {"created": 2, "existing": 0}}
    assert second == {"roles": {"created": 0, "existing": 2}}
    assert {r.name for r in session.query(Role)} == {"User", ADMIN_ROLE}


def test_roles_command_prints_summary(app, session):
    result = app.test_cli_runner().invoke(seed_cli, ["roles"])

    assert result.exit_code == 0, result.output
    assert "Seed summary:" in result.output
    assert "roles" in result.output
    assert session.query(Role).filter_by(name=ADMIN_ROLE).count() == 1
