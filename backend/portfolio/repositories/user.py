"""User repository for persistence and credential checks."""

from __future__ import annotations

from datetime import datetime
from typing import cast
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload

from portfolio.models.user import User
from portfolio.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Handles lookups, profile updates, password hashing and the atomic
    refresh-token swap. Token issuance lives in the token service.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
        }

    def _updatable_fields(self):
        """Profile fields only; credentials and tokens have dedicated paths."""
        return {"full_name", "headline", "bio"}

    def _default_eagerload(self, stmt):
        return stmt.options(selectinload(User.roles))

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = self._default_eagerload(select(User).where(User.email == email.lower().strip()))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        stmt = self._default_eagerload(select(User).where(User.username == username.strip()))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_login(self, identifier: str) -> User | None:
        """Resolve a login identifier that may be an email or a username."""
        if "@" in identifier:
            return self.get_by_email(identifier)
        return self.get_by_username(identifier)

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return self.session.execute(stmt.limit(1)).first() is not None

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: UUID, new_password: str) -> None:
        """Hash and store ``new_password`` for ``user_id``.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password
        self.flush()

    def authenticate(self, identifier: str, password: str) -> User | None:
        """Return the user matching ``identifier`` and ``password`` or ``None``."""
        user = self.get_by_login(identifier)
        if not user or not user.verify_password(password):
            return None
        return user

    # ---------------------------- Refresh token ----------------------------

    def rotate_refresh_token(
        self,
        user_id: UUID,
        expected: str,
        new_token: str,
        expires_at: datetime,
        now: datetime,
    ) -> bool:
        """Swap ``expected`` for ``new_token`` in one conditional ``UPDATE``.

        The row only changes if it still holds ``expected`` and that token
        has not expired at ``now``; concurrent callers presenting the same
        token therefore see at most one success.

        :returns: ``True`` if exactly one row was rotated.
        """
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.refresh_token == expected,
                User.refresh_token_expiry_time > now,
            )
            .values(refresh_token=new_token, refresh_token_expiry_time=expires_at)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1
