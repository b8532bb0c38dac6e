from __future__ import annotations

from dataclasses import dataclass, field

from portfolio.services.authentication.dto import UserOut
from portfolio.services.resources.dto import (
    EducationOut,
    ExperienceOut,
    ProjectOut,
    SkillOut,
    SocialLinkOut,
)


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """Public profile fields; ``None`` clears a field."""

    full_name: str | None = None
    headline: str | None = None
    bio: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileOut:
    """Everything rendered on a public portfolio page."""

    user: UserOut
    educations: list[EducationOut] = field(default_factory=list)
    experiences: list[ExperienceOut] = field(default_factory=list)
    projects: list[ProjectOut] = field(default_factory=list)
    skills: list[SkillOut] = field(default_factory=list)
    social_links: list[SocialLinkOut] = field(default_factory=list)
