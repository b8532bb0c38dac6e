"""Education and Experience entries of a user's résumé."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from portfolio.core.extensions import db

from .base import OwnedMixin, ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .user import User


class Education(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A degree or course followed by the user.

    ``end_date`` is ``NULL`` while the studies are ongoing.
    """

    __tablename__ = "educations"

    institution: Mapped[str] = mapped_column(String(150), nullable=False)
    degree: Mapped[str] = mapped_column(String(150), nullable=False)
    field_of_study: Mapped[str | None] = mapped_column(String(150), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="educations")

    __table_args__ = (
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date", name="end_after_start"
        ),
    )


class Experience(UUIDPKMixin, OwnedMixin, ReprMixin, TimestampMixin, db.Model):
    """A position held by the user; ``end_date`` is ``NULL`` for the current job."""

    __tablename__ = "experiences"

    company: Mapped[str] = mapped_column(String(150), nullable=False)
    position: Mapped[str] = mapped_column(String(150), nullable=False)
    location: Mapped[str | None] = mapped_column(String(150), nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship("User", back_populates="experiences")

    __table_args__ = (
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date", name="end_after_start"
        ),
    )

    @property
    def is_current(self) -> bool:
        return self.end_date is None
