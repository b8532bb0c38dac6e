"""Flask CLI commands for idempotent reference-data seeding."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from portfolio.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Print one ``created``/``existing`` line per table."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


def seed_roles(names: list[str]) -> dict[str, dict[str, int]]:
    """Create every role in ``names`` that does not exist yet."""
    counters = {"created": 0, "existing": 0}
    with SQLAlchemyUnitOfWork() as uow:
        for name in names:
            _, created = uow.roles.get_or_create(name)
            counters["created" if created else "existing"] += 1
            LOGGER.debug("seed.role name=%s created=%s", name, created)
    return {"roles": counters}


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
def seed_cli(verbose: bool) -> None:
    """Database seeding commands."""
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)


@seed_cli.command("roles")
@with_appcontext
def roles_command() -> None:
    """Create the default user role and the admin role."""
    names = [current_app.config.get("DEFAULT_USER_ROLE", "User"), ADMIN_ROLE]
    try:
        summary = seed_roles(names)
    except SQLAlchemyError as exc:
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)
