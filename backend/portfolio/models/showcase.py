"""Projects and skills shown on the public portfolio page."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio.core.extensions import db

from .base import OwnedMixin, ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User

SKILL_LEVEL_MIN = 1
SKILL_LEVEL_MAX = 5


class Project(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A showcased piece of work.

    Fields
    ------
    title : str
        Display title.
    technologies : str | None
        Free-form, comma-separated stack list (e.g. ``"Flask, Postgres"``).
    repository_url, live_url, image_url : str | None
        Optional links rendered next to the project.
    """

    __tablename__ = "projects"

    title: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    technologies: Mapped[str | None] = mapped_column(String(300), nullable=True)
    repository_url: Mapped[str | None] = mapped_column(String(200), nullable=True)
    live_url: Mapped[str | None] = mapped_column(String(200), nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(200), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="projects")


class Skill(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """A named skill with a 1..5 proficiency level, unique per user."""

    __tablename__ = "skills"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=SKILL_LEVEL_MIN)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="skills")

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_skills_user_id_name"),
        CheckConstraint(
            f"level BETWEEN {SKILL_LEVEL_MIN} AND {SKILL_LEVEL_MAX}", name="level_range"
        ),
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        v = (value or "").strip()
        if not v:
            raise ValueError("Skill name is required.")
        return v
