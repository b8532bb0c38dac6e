"""Repositories for projects, skills and social links."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select

from portfolio.models.showcase import Project, Skill
from portfolio.models.social_link import SocialLink
from portfolio.repositories.owned import OwnedRepository


class ProjectRepository(OwnedRepository[Project]):
    model = Project

    def _sortable_fields(self):
        return {"title": Project.title, "created_at": Project.created_at}

    def _updatable_fields(self):
        return {
            "title",
            "description",
            "technologies",
            "repository_url",
            "live_url",
            "image_url",
        }


class SkillRepository(OwnedRepository[Skill]):
    """Persistence for :class:`Skill`; strongest skills are listed first."""

    model = Skill
    _default_sort = ("-level", "name")

    def _sortable_fields(self):
        return {
            "name": Skill.name,
            "level": Skill.level,
            "category": Skill.category,
            "created_at": Skill.created_at,
        }

    def _updatable_fields(self):
        return {"name", "level", "category"}

    def exists_for_user(
        self, user_id: UUID, name: str, *, exclude_id: UUID | None = None
    ) -> bool:
        """Case-insensitive name clash check within one user's skills."""
        stmt = select(Skill.id).where(
            Skill.user_id == user_id,
            func.lower(Skill.name) == name.strip().lower(),
        )
        if exclude_id is not None:
            stmt = stmt.where(Skill.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None


class SocialLinkRepository(OwnedRepository[SocialLink]):
    model = SocialLink
    _default_sort = ("platform",)

    def _sortable_fields(self):
        return {"platform": SocialLink.platform, "created_at": SocialLink.created_at}

    def _updatable_fields(self):
        return {"platform", "url", "icon"}
