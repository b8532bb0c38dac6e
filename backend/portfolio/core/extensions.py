"""Flask-SQLAlchemy and Flask-Migrate singletons for the portfolio app."""

from __future__ import annotations

from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData, event
from sqlalchemy.engine import Engine

# Constraint names must stay stable: migrations and ``violates()`` match on them
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on ``ON DELETE CASCADE`` support for SQLite connections."""
    if engine.url.get_backend_name() != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_app(app: Flask) -> None:
    """Bind the database and migrations to ``app``.

    Importing :mod:`portfolio.models` here registers every table on
    ``metadata`` before Alembic or ``create_all`` look at it.
    """
    db.init_app(app)

    from portfolio import models as _models  # noqa: F401

    migrate.init_app(app, db)

    with app.app_context():
        _enable_sqlite_foreign_keys(db.engine)
