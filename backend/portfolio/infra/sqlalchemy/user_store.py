# portfolio/infra/sqlalchemy/user_store.py
from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from portfolio.models.user import User
from portfolio.services._shared.ports import RotationResult, UserStore
from portfolio.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class SQLAlchemyUserStore(UserStore):
    """
    :class:`UserStore` backed by the application database.

    Reads run in a read-only unit of work. :meth:`update` commits through a
    read-write unit of work and turns database errors into ``False`` (the
    unit of work has already rolled back by then). :meth:`rotate_refresh_token`
    is a single conditional ``UPDATE``, so two requests racing on the same
    refresh token cannot both win.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.log = logger or logging.getLogger(__name__)

    def get_by_id(self, user_id: UUID) -> User | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.users.get(user_id)

    def get_roles(self, user: User) -> list[str]:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.roles.names_for_user(user.id)

    def update(self, user: User) -> bool:
        # Read before the attempt: a rollback expires every attribute
        user_id = user.id
        try:
            with SQLAlchemyUnitOfWork() as uow:
                uow.session.add(user)
                uow.users.flush()
        except SQLAlchemyError:
            self.log.exception("user_store.update_failed user_id=%s", user_id)
            return False
        return True

    def rotate_refresh_token(
        self,
        user_id: UUID,
        *,
        expected: str,
        new_token: str,
        expires_at: datetime,
        now: datetime,
    ) -> RotationResult:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                rotated = uow.users.rotate_refresh_token(user_id, expected, new_token, expires_at, now)
        except SQLAlchemyError:
            self.log.exception("user_store.rotate_failed user_id=%s", user_id)
            return RotationResult.FAILED
        return RotationResult.OK if rotated else RotationResult.STALE
