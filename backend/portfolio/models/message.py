"""Contact messages left by visitors for a portfolio owner."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from portfolio.core.extensions import db

from .base import OwnedMixin, ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User


class Message(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Inbound message addressed to the owning user.

    Visitors are anonymous, so the sender is described by name and email
    only. ``user_id`` is the recipient.
    """

    __tablename__ = "messages"

    sender_name: Mapped[str] = mapped_column(String(100), nullable=False)
    sender_email: Mapped[str] = mapped_column(String(254), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(200), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    user: Mapped[User] = relationship("User", back_populates="messages")

    @validates("sender_email")
    def _normalize_sender_email(self, key: str, value: str) -> str:
        return (value or "").strip().lower()
