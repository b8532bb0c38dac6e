"""SocialLink model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.core.extensions import db

from .base import OwnedMixin, ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User


class SocialLink(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """Link to one of the user's external profiles (GitHub, LinkedIn, ...)."""

    __tablename__ = "social_links"

    platform: Mapped[str] = mapped_column(String(100), nullable=False)
    url: Mapped[str] = mapped_column(String(200), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(200), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="social_links")
