"""
DTOs for AuthenticationService.

Inputs are produced by the marshmallow schemas in
``portfolio.schemas.auth``; outputs never carry password hashes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from portfolio.models.user import User

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    :param email: Login email (normalized by the model).
    :param username: Public handle.
    :param password: Raw password, hashed by the model setter.
    :param full_name: Optional real name.
    """

    email: str
    username: str
    password: str
    full_name: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    :param identifier: Email or username.
    :param password: Raw password.
    """

    identifier: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    current_password: str
    new_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """Public-safe view of a user."""

    id: UUID
    email: str
    username: str
    full_name: str | None = None
    headline: str | None = None
    bio: str | None = None
    roles: list[str] = field(default_factory=list)

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            full_name=user.full_name,
            headline=user.headline,
            bio=user.bio,
            roles=user.role_names,
        )


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    :param access_token: Signed JWT for the ``Authorization`` header.
    :param refresh_token: Opaque token for :meth:`AuthenticationService.refresh`.
    :param refresh_token_expires_at: Refresh token expiry (UTC).
    :param user: The authenticated user.
    """

    access_token: str
    refresh_token: str
    refresh_token_expires_at: datetime | None
    user: UserOut
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    access_token: str
    refresh_token: str
    refresh_token_expires_at: datetime | None
    token_type: str = "Bearer"
