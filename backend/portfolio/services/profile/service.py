from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from portfolio.schemas.profile import ProfileUpdateSchema
from portfolio.services._shared.base import BaseService
from portfolio.services._shared.errors import NotFoundError
from portfolio.services._shared.result import Result
from portfolio.services.authentication.dto import UserOut
from portfolio.services.profile.dto import ProfileOut, ProfileUpdateIn
from portfolio.services.resources.dto import (
    EducationOut,
    ExperienceOut,
    ProjectOut,
    SkillOut,
    SocialLinkOut,
)


class ProfileService(BaseService):
    """Public portfolio page (read) and the owner's profile fields (write)."""

    def get_profile(self, user_id: UUID) -> Result[ProfileOut]:
        """Assemble the public profile of ``user_id``; no authentication needed."""
        return self.execute("get_profile", lambda: self._get_profile(user_id))

    def _get_profile(self, user_id: UUID) -> ProfileOut:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return ProfileOut(
                user=UserOut.from_model(user),
                educations=[EducationOut.from_model(r) for r in uow.educations.list_by_user_id(user_id)],
                experiences=[ExperienceOut.from_model(r) for r in uow.experiences.list_by_user_id(user_id)],
                projects=[ProjectOut.from_model(r) for r in uow.projects.list_by_user_id(user_id)],
                skills=[SkillOut.from_model(r) for r in uow.skills.list_by_user_id(user_id)],
                social_links=[
                    SocialLinkOut.from_model(r) for r in uow.social_links.list_by_user_id(user_id)
                ],
            )

    def update_profile(
        self, payload: Mapping[str, Any] | None, access_token: str | None
    ) -> Result[UserOut]:
        """Replace ``full_name``, ``headline`` and ``bio`` of the caller."""
        return self.execute(
            "update_profile",
            lambda: self._update_profile(
                ProfileUpdateSchema().load(self.payload(payload)), access_token
            ),
        )

    def _update_profile(self, dto: ProfileUpdateIn, access_token: str | None) -> UserOut:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.assign_updates(
                user,
                {"full_name": dto.full_name, "headline": dto.headline, "bio": dto.bio},
            )
            return UserOut.from_model(user)
