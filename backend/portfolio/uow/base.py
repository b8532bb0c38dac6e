"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio.repositories import (
        EducationRepository,
        ExperienceRepository,
        MessageRepository,
        ProjectRepository,
        RoleRepository,
        SkillRepository,
        SocialLinkRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    Transactional boundary for one use case.

    Repositories exposed as attributes share a single session, so everything
    done inside ``with uow:`` lands (or fails) together.
    """

    users: UserRepository
    roles: RoleRepository
    educations: EducationRepository
    experiences: ExperienceRepository
    projects: ProjectRepository
    skills: SkillRepository
    social_links: SocialLinkRepository
    messages: MessageRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
