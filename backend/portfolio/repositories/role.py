"""Role repository."""

from __future__ import annotations

from typing import cast
from uuid import UUID

from sqlalchemy import select

from portfolio.models.role import Role, user_roles
from portfolio.repositories.base import BaseRepository


class RoleRepository(BaseRepository[Role]):
    model = Role

    def _sortable_fields(self):
        return {"name": Role.name}

    def _filterable_fields(self):
        return {"name": Role.name}

    def get_by_name(self, name: str) -> Role | None:
        stmt = select(Role).where(Role.name == name.strip())
        return cast(Role | None, self.session.execute(stmt).scalars().first())

    def get_or_create(self, name: str) -> tuple[Role, bool]:
        """Return ``(role, created)``; new roles are flushed immediately."""
        role = self.get_by_name(name)
        if role is not None:
            return role, False
        return self.add(Role(name=name)), True

    def names_for_user(self, user_id: UUID) -> list[str]:
        """Role names granted to ``user_id`` in alphabetical order."""
        stmt = (
            select(Role.name)
            .join(user_roles, user_roles.c.role_id == Role.id)
            .where(user_roles.c.user_id == user_id)
            .order_by(Role.name.asc())
        )
        return list(self.session.execute(stmt).scalars().all())
