"""
Domain-level exceptions used within the service layer.

These exceptions are framework-agnostic: they never import Flask or HTTP
helpers. ``BaseService.translate_exceptions()`` maps them onto the RFC 7807
errors in ``portfolio/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the columns, so
    callers should name constraints after the columns they cover.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The database constraint to match (e.g. ``'uq_users_email'``).
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # SQLite: "UNIQUE constraint failed: users.email"
    table_column = constraint_name.lower().removeprefix("uq_").replace("_", ".", 1)
    return table_column in message


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Raising a bare ``ServiceError`` signals an operation that could not be
    completed for server-side reasons (e.g. a failed write-through).
    """


class ConfigurationError(ServiceError):
    """Required settings (such as the signing key) are missing or empty."""


class AuthError(ServiceError):
    """Authentication failed: missing token, bad credentials, stale refresh token."""


class ValidationError(ServiceError):
    """A token failed signature, issuer, audience, expiry or structure checks."""


class AuthorizationError(ServiceError):
    """The authenticated user may not act on the target resource."""


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Skill").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int | UUID

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"
