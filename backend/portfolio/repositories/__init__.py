"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from portfolio.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    apply_sorting,
    paginate_select,
)
from portfolio.repositories.career import EducationRepository, ExperienceRepository
from portfolio.repositories.message import MessageRepository
from portfolio.repositories.owned import OwnedRepository
from portfolio.repositories.role import RoleRepository
from portfolio.repositories.showcase import (
    ProjectRepository,
    SkillRepository,
    SocialLinkRepository,
)
from portfolio.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "OwnedRepository",
    "Page",
    "Pagination",
    "apply_sorting",
    "paginate_select",
    # Domain
    "EducationRepository",
    "ExperienceRepository",
    "MessageRepository",
    "ProjectRepository",
    "RoleRepository",
    "SkillRepository",
    "SocialLinkRepository",
    "UserRepository",
]
