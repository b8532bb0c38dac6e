"""
Owned-resource services
=======================

Education, experience, projects, skills and social links share one shape:

- ``list_by_user_id`` and ``get`` are public reads.
- ``add``, ``update`` and ``delete`` need an access token and only touch
  rows owned by the caller.

:class:`OwnedResourceService` implements that shape once; subclasses bind
the repository, schema, model and output DTO.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import asdict
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

from marshmallow import Schema

from portfolio.models import Education, Experience, Project, Skill, SocialLink
from portfolio.repositories.owned import OwnedRepository
from portfolio.schemas.resources import (
    EducationSchema,
    ExperienceSchema,
    ProjectSchema,
    SkillSchema,
    SocialLinkSchema,
)
from portfolio.services._shared.base import BaseService
from portfolio.services._shared.errors import ConflictError, NotFoundError
from portfolio.services._shared.result import Result
from portfolio.services.resources.dto import (
    EducationOut,
    ExperienceOut,
    ProjectOut,
    SkillIn,
    SkillOut,
    SocialLinkOut,
)
from portfolio.uow.base import UnitOfWork

M = TypeVar("M")
Out = TypeVar("Out")


class OwnedResourceService(BaseService, Generic[M, Out]):
    """
    CRUD over one user-owned resource type.

    Subclasses set:

    * ``entity``: display name used in errors and logs.
    * ``repository``: attribute name of the repository on the unit of work.
    * ``model``: mapped class instantiated by :meth:`add`.
    * ``schema``: marshmallow schema loading a full ``*In`` DTO.
    * ``to_out``: ORM row to output DTO.
    """

    entity: ClassVar[str]
    repository: ClassVar[str]
    model: ClassVar[type[Any]]
    schema: ClassVar[type[Schema]]
    to_out: ClassVar[Callable[[Any], Any]]

    def _repo(self, uow: UnitOfWork) -> OwnedRepository[M]:
        return getattr(uow, self.repository)

    def _load(self, payload: Mapping[str, Any] | None) -> Any:
        return self.schema().load(self.payload(payload))

    def _check_write(
        self, uow: UnitOfWork, user_id: UUID, dto: Any, entity_id: UUID | None = None
    ) -> None:
        """Hook for extra invariants before a write (uniqueness, ...)."""

    # ------------------------------------------------------------------ #
    # Public reads
    # ------------------------------------------------------------------ #

    def list_by_user_id(self, user_id: UUID) -> Result[list[Out]]:
        """All rows owned by ``user_id``; an empty list for unknown users."""
        return self.execute(f"{self.entity}.list", lambda: self._list(user_id))

    def _list(self, user_id: UUID) -> list[Out]:
        with self.ro_uow() as uow:
            return [type(self).to_out(row) for row in self._repo(uow).list_by_user_id(user_id)]

    def get(self, entity_id: UUID) -> Result[Out]:
        return self.execute(f"{self.entity}.get", lambda: self._get(entity_id))

    def _get(self, entity_id: UUID) -> Out:
        with self.ro_uow() as uow:
            row = self._repo(uow).get(entity_id)
            if row is None:
                raise NotFoundError(self.entity, entity_id)
            return type(self).to_out(row)

    # ------------------------------------------------------------------ #
    # Owner writes
    # ------------------------------------------------------------------ #

    def add(self, payload: Mapping[str, Any] | None, access_token: str | None) -> Result[Out]:
        return self.execute(f"{self.entity}.add", lambda: self._add(payload, access_token))

    def _add(self, payload: Mapping[str, Any] | None, access_token: str | None) -> Out:
        user_id = self.current_user_id(access_token)
        dto = self._load(payload)
        with self.rw_uow() as uow:
            if uow.users.get(user_id) is None:
                raise NotFoundError("User", user_id)
            self._check_write(uow, user_id, dto)
            row = self._repo(uow).add(self.model(user_id=user_id, **asdict(dto)))
            out = type(self).to_out(row)
        self.log.info("%s.added id=%s user_id=%s", self.entity, out.id, user_id)
        return out

    def update(
        self,
        payload: Mapping[str, Any] | None,
        entity_id: UUID,
        access_token: str | None,
    ) -> Result[Out]:
        """Replace every field of ``entity_id`` with ``payload``."""
        return self.execute(
            f"{self.entity}.update", lambda: self._update(payload, entity_id, access_token)
        )

    def _update(
        self, payload: Mapping[str, Any] | None, entity_id: UUID, access_token: str | None
    ) -> Out:
        user_id = self.current_user_id(access_token)
        dto = self._load(payload)
        with self.rw_uow() as uow:
            repo = self._repo(uow)
            row = repo.get(entity_id)
            if row is None:
                raise NotFoundError(self.entity, entity_id)
            self.ensure_owner(user_id, row.user_id)
            self._check_write(uow, user_id, dto, entity_id)
            repo.assign_updates(row, asdict(dto))
            return type(self).to_out(row)

    def delete(self, entity_id: UUID, access_token: str | None) -> Result[None]:
        return self.execute(f"{self.entity}.delete", lambda: self._delete(entity_id, access_token))

    def _delete(self, entity_id: UUID, access_token: str | None) -> None:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            repo = self._repo(uow)
            row = repo.get(entity_id)
            if row is None:
                raise NotFoundError(self.entity, entity_id)
            self.ensure_owner(user_id, row.user_id)
            repo.delete(row)
        self.log.info("%s.deleted id=%s user_id=%s", self.entity, entity_id, user_id)


class EducationService(OwnedResourceService[Education, EducationOut]):
    entity = "Education"
    repository = "educations"
    model = Education
    schema = EducationSchema
    to_out = EducationOut.from_model


class ExperienceService(OwnedResourceService[Experience, ExperienceOut]):
    entity = "Experience"
    repository = "experiences"
    model = Experience
    schema = ExperienceSchema
    to_out = ExperienceOut.from_model


class ProjectService(OwnedResourceService[Project, ProjectOut]):
    entity = "Project"
    repository = "projects"
    model = Project
    schema = ProjectSchema
    to_out = ProjectOut.from_model


class SkillService(OwnedResourceService[Skill, SkillOut]):
    """Skills additionally keep names unique per user (case-insensitive)."""

    entity = "Skill"
    repository = "skills"
    model = Skill
    schema = SkillSchema
    to_out = SkillOut.from_model

    def _check_write(
        self, uow: UnitOfWork, user_id: UUID, dto: SkillIn, entity_id: UUID | None = None
    ) -> None:
        if uow.skills.exists_for_user(user_id, dto.name, exclude_id=entity_id):
            raise ConflictError("Skill", f"'{dto.name}' already exists")


class SocialLinkService(OwnedResourceService[SocialLink, SocialLinkOut]):
    entity = "SocialLink"
    repository = "social_links"
    model = SocialLink
    schema = SocialLinkSchema
    to_out = SocialLinkOut.from_model
