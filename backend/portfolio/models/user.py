"""User model: credentials, public profile and refresh-token state."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio.core.extensions import db

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .career import Education, Experience
    from .message import Message
    from .role import Role
    from .showcase import Project, Skill
    from .social_link import SocialLink


class User(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Portfolio owner and authentication identity.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    username : str
        Public handle, unique per system. Also emitted as the ``name`` claim.
    password_hash : str
        Hashed password (write-only setter via ``password``).
    full_name, headline, bio : str | None
        Optional public profile fields.
    refresh_token : str | None
        The single active refresh token. Overwritten on login and refresh,
        cleared on logout.
    refresh_token_expiry_time : datetime | None
        Instant after which ``refresh_token`` is no longer accepted.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    full_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    headline: Mapped[str | None] = mapped_column(String(150), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    refresh_token: Mapped[str | None] = mapped_column(String(128), nullable=True)
    refresh_token_expiry_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # ---------------- Relationships ----------------
    roles: Mapped[list[Role]] = relationship(
        "Role", secondary="user_roles", back_populates="users", lazy="selectin"
    )
    educations: Mapped[list[Education]] = relationship(
        "Education", back_populates="user", cascade="all, delete-orphan"
    )
    experiences: Mapped[list[Experience]] = relationship(
        "Experience", back_populates="user", cascade="all, delete-orphan"
    )
    projects: Mapped[list[Project]] = relationship(
        "Project", back_populates="user", cascade="all, delete-orphan"
    )
    skills: Mapped[list[Skill]] = relationship(
        "Skill", back_populates="user", cascade="all, delete-orphan"
    )
    social_links: Mapped[list[SocialLink]] = relationship(
        "SocialLink", back_populates="user", cascade="all, delete-orphan"
    )
    messages: Mapped[list[Message]] = relationship(
        "Message", back_populates="user", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("username", name="uq_users_username"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Refresh-token state --------------------
    @property
    def refresh_expires_at(self) -> datetime | None:
        """Stored refresh expiry as an aware UTC datetime.

        Some backends (SQLite) hand back naive values even for
        ``DateTime(timezone=True)`` columns; those are read as UTC.
        """
        value = self.refresh_token_expiry_time
        if value is None:
            return None
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)

    def has_active_refresh_token(self, now: datetime | None = None) -> bool:
        """Return whether a refresh token is stored and not yet expired."""
        expires_at = self.refresh_expires_at
        if not self.refresh_token or expires_at is None:
            return False
        return expires_at > (now or datetime.now(UTC))

    @property
    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens in the schemas.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        if not isinstance(value, str):
            raise ValueError("Username is required.")
        v = value.strip()
        if not v:
            raise ValueError("Username is required.")
        return v
