"""Base repository for resources that belong to a single user."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar, cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from portfolio.repositories.base import BaseRepository

O = TypeVar("O")


class OwnedRepository(BaseRepository[O]):
    """Adds owner-scoped lookups on top of :class:`BaseRepository`.

    The mapped ``model`` must expose ``user_id`` (see ``OwnedMixin``).
    ``_default_sort`` controls the order of :meth:`list_by_user_id`.
    """

    _default_sort: tuple[str, ...] = ("-created_at",)

    def _owner_attr(self) -> InstrumentedAttribute[Any]:
        return cast(InstrumentedAttribute[Any], getattr(self.model, "user_id"))

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"user_id": self._owner_attr()}

    def list_by_user_id(
        self, user_id: UUID, *, sort: Iterable[str] | None = None
    ) -> list[O]:
        """Return every resource owned by ``user_id`` (empty list when none)."""
        return self.list(
            filters={"user_id": user_id},
            sort=list(sort) if sort is not None else list(self._default_sort),
        )

    def get_owned(self, entity_id: UUID, user_id: UUID) -> O | None:
        """Fetch ``entity_id`` only if it belongs to ``user_id``."""
        pk_attr = self._pk_attr()
        stmt = self._default_eagerload(
            select(self.model).where(pk_attr == entity_id, self._owner_attr() == user_id)
        )
        return cast(O | None, self.session.execute(stmt).scalars().first())
