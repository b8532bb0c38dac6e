"""Convenience exports for payload schemas."""

from __future__ import annotations

from .auth import ChangePasswordSchema, LoginSchema, RefreshSchema, RegisterSchema
from .common import PaginationQuerySchema, PayloadSchema
from .profile import MessageSchema, ProfileUpdateSchema
from .resources import (
    EducationSchema,
    ExperienceSchema,
    ProjectSchema,
    SkillSchema,
    SocialLinkSchema,
)

__all__ = [
    "ChangePasswordSchema",
    "EducationSchema",
    "ExperienceSchema",
    "LoginSchema",
    "MessageSchema",
    "PaginationQuerySchema",
    "PayloadSchema",
    "ProfileUpdateSchema",
    "ProjectSchema",
    "RefreshSchema",
    "RegisterSchema",
    "SkillSchema",
    "SocialLinkSchema",
]
