from __future__ import annotations

import threading
from collections.abc import Iterable
from datetime import datetime
from enum import Enum, auto
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from portfolio.models.user import User


class RotationResult(Enum):
    """Outcome of a compare-and-swap refresh token rotation."""

    OK = auto()
    STALE = auto()  # stored token changed, was cleared or expired meanwhile
    FAILED = auto()  # the write itself did not go through


class UserStore(Protocol):
    """
    Persistence port used by the token service.

    The token service loads a user, mutates its refresh-token fields and
    hands it back through :meth:`update` (load, mutate, save). ``update``
    reports failure through its return value instead of raising.

    :meth:`rotate_refresh_token` MUST be atomic: of several callers
    presenting the same stored token, at most one gets ``OK``.
    """

    def get_by_id(self, user_id: UUID) -> User | None:
        """Return the user or ``None`` when it does not exist."""

    def get_roles(self, user: User) -> list[str]:
        """Return the role names granted to ``user`` (possibly empty)."""

    def update(self, user: User) -> bool:
        """Persist the current state of ``user``; ``True`` on success."""

    def rotate_refresh_token(
        self,
        user_id: UUID,
        *,
        expected: str,
        new_token: str,
        expires_at: datetime,
        now: datetime,
    ) -> RotationResult:
        """Replace ``expected`` with ``new_token`` if it is still stored and unexpired at ``now``."""


class InMemoryUserStore(UserStore):
    """
    Dictionary-backed store for unit tests.

    ``fail_updates`` makes every write report failure so callers'
    write-through error paths can be exercised. Saved copies are snapshots
    of the refresh-token fields, which is all the token service writes.
    """

    def __init__(
        self,
        users: Iterable[User] = (),
        *,
        roles: dict[UUID, list[str]] | None = None,
        fail_updates: bool = False,
    ) -> None:
        self._lock = threading.Lock()
        self._users: dict[UUID, User] = {u.id: u for u in users}
        self._roles: dict[UUID, list[str]] = dict(roles or {})
        self.fail_updates = fail_updates
        self.saved: dict[UUID, tuple[str | None, object]] = {}
        self.update_calls = 0

    def add(self, user: User, roles: Iterable[str] = ()) -> User:
        with self._lock:
            self._users[user.id] = user
            self._roles[user.id] = list(roles)
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def get_roles(self, user: User) -> list[str]:
        with self._lock:
            return sorted(self._roles.get(user.id, []))

    def update(self, user: User) -> bool:
        with self._lock:
            self.update_calls += 1
            if self.fail_updates:
                return False
            self._users[user.id] = user
            self.saved[user.id] = (user.refresh_token, user.refresh_token_expiry_time)
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
        with self._lock:
            self.update_calls += 1
            if self.fail_updates:
                return RotationResult.FAILED
            user = self._users.get(user_id)
            if user is None or user.refresh_token != expected:
                return RotationResult.STALE
            if not user.has_active_refresh_token(now):
                return RotationResult.STALE
            user.refresh_token = new_token
            user.refresh_token_expiry_time = expires_at
            self.saved[user_id] = (new_token, expires_at)
            return RotationResult.OK
