"""
DTOs for the owned-resource services.

Each ``*In`` is a full replacement payload (used for both add and update);
each ``*Out`` is built from the ORM row with ``from_model``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from portfolio.models import Education, Experience, Project, Skill, SocialLink

# --------------------------------------------------------------------------- #
# Education
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class EducationIn:
    institution: str
    degree: str
    start_date: date
    field_of_study: str | None = None
    end_date: date | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class EducationOut:
    id: UUID
    user_id: UUID
    institution: str
    degree: str
    field_of_study: str | None
    start_date: date
    end_date: date | None
    description: str | None

    @classmethod
    def from_model(cls, row: Education) -> EducationOut:
        return cls(
            id=row.id,
            user_id=row.user_id,
            institution=row.institution,
            degree=row.degree,
            field_of_study=row.field_of_study,
            start_date=row.start_date,
            end_date=row.end_date,
            description=row.description,
        )


# --------------------------------------------------------------------------- #
# Experience
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ExperienceIn:
    company: str
    position: str
    start_date: date
    location: str | None = None
    end_date: date | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ExperienceOut:
    id: UUID
    user_id: UUID
    company: str
    position: str
    location: str | None
    start_date: date
    end_date: date | None
    description: str | None
    is_current: bool

    @classmethod
    def from_model(cls, row: Experience) -> ExperienceOut:
        return cls(
            id=row.id,
            user_id=row.user_id,
            company=row.company,
            position=row.position,
            location=row.location,
            start_date=row.start_date,
            end_date=row.end_date,
            description=row.description,
            is_current=row.is_current,
        )


# --------------------------------------------------------------------------- #
# Project
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ProjectIn:
    title: str
    description: str | None = None
    technologies: str | None = None
    repository_url: str | None = None
    live_url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectOut:
    id: UUID
    user_id: UUID
    title: str
    description: str | None
    technologies: list[str]
    repository_url: str | None
    live_url: str | None
    image_url: str | None

    @classmethod
    def from_model(cls, row: Project) -> ProjectOut:
        techs = [t.strip() for t in (row.technologies or "").split(",") if t.strip()]
        return cls(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            description=row.description,
            technologies=techs,
            repository_url=row.repository_url,
            live_url=row.live_url,
            image_url=row.image_url,
        )


# --------------------------------------------------------------------------- #
# Skill
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SkillIn:
    name: str
    level: int = 1
    category: str | None = None


@dataclass(frozen=True, slots=True)
class SkillOut:
    id: UUID
    user_id: UUID
    name: str
    level: int
    category: str | None

    @classmethod
    def from_model(cls, row: Skill) -> SkillOut:
        return cls(
            id=row.id,
            user_id=row.user_id,
            name=row.name,
            level=row.level,
            category=row.category,
        )


# --------------------------------------------------------------------------- #
# Social link
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SocialLinkIn:
    platform: str
    url: str
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class SocialLinkOut:
    id: UUID
    user_id: UUID
    platform: str
    url: str
    icon: str | None

    @classmethod
    def from_model(cls, row: SocialLink) -> SocialLinkOut:
        return cls(
            id=row.id,
            user_id=row.user_id,
            platform=row.platform,
            url=row.url,
            icon=row.icon,
        )
