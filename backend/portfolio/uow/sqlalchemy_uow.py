"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from portfolio.core.extensions import db
from portfolio.repositories import (
    EducationRepository,
    ExperienceRepository,
    MessageRepository,
    ProjectRepository,
    RoleRepository,
    SkillRepository,
    SocialLinkRepository,
    UserRepository,
)
from portfolio.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class ReadOnlyViolation(RuntimeError):
    """A write was attempted inside a read-only unit of work."""


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session | scoped_session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.roles = RoleRepository(session=self.session)
        self.educations = EducationRepository(session=self.session)
        self.experiences = ExperienceRepository(session=self.session)
        self.projects = ProjectRepository(session=self.session)
        self.skills = SkillRepository(session=self.session)
        self.social_links = SocialLinkRepository(session=self.session)
        self.messages = MessageRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write unit of work on the Flask-scoped session.

    Commits when the block exits cleanly and rolls back when it raises or
    when the commit itself fails.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only unit of work on the Flask-scoped session.

    While the block runs, ORM flushes of pending changes and DML/DDL sent
    through the connection raise :class:`ReadOnlyViolation`. ``commit()`` is
    never allowed.

    If the session is idle on entry, the unit of work begins its own
    transaction, applies ``SET TRANSACTION READ ONLY`` on PostgreSQL and
    MySQL, and rolls it back on exit. If a transaction is already running
    (an outer unit of work, a test fixture) it attaches to it: the guards are
    installed but nothing is rolled back.

    Parameters
    ----------
    isolation_level:
        Optional isolation level applied when the transaction is owned and
        the dialect supports ``SET TRANSACTION``.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )
    _SET_TRANSACTION_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(self, *, isolation_level: str | None = None) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self._owns_transaction = False
        self._conn: Connection | None = None
        self._guarded_session: Session | None = None

    def _concrete_session(self) -> Session:
        session = self.session
        return session() if isinstance(session, scoped_session) else session

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # The scoped registry proxies queries but not transaction state
        self._owns_transaction = not self._concrete_session().in_transaction()
        if self._owns_transaction:
            self.session.begin()

        self._conn = self.session.connection()
        if self._owns_transaction:
            self._apply_transaction_directives(self._conn.dialect.name)
        self._install_guards()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_transaction:
                self.session.rollback()
        finally:
            self._remove_guards()
            self._owns_transaction = False
            self._conn = None

    def commit(self) -> None:
        raise ReadOnlyViolation("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards ---------------------------------

    def _apply_transaction_directives(self, dialect: str) -> None:
        if dialect not in self._SET_TRANSACTION_DIALECTS:
            return
        try:
            if self.isolation_level:
                iso = self.isolation_level.upper().strip()
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
            self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            log.warning("SET TRANSACTION failed (%s); relying on guards only.", exc)

    def _before_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise ReadOnlyViolation(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany):
        first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
        if first_token.startswith(self._WRITE_PREFIXES):
            raise ReadOnlyViolation(
                f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
            )

    def _install_guards(self) -> None:
        # Listen on the concrete Session, not the scoped registry (which would
        # register on the Session class for every thread).
        self._guarded_session = self._concrete_session()
        event.listen(self._guarded_session, "before_flush", self._before_flush)
        event.listen(self._conn, "before_cursor_execute", self._before_cursor_execute)

    def _remove_guards(self) -> None:
        if self._guarded_session is not None:
            with suppress(SQLAlchemyError):
                event.remove(self._guarded_session, "before_flush", self._before_flush)
            self._guarded_session = None
        if self._conn is not None:
            with suppress(SQLAlchemyError):
                event.remove(self._conn, "before_cursor_execute", self._before_cursor_execute)
