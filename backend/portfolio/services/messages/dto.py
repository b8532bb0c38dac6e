from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from portfolio.models.message import Message
from portfolio.services._shared.dto import PageMeta


@dataclass(frozen=True, slots=True)
class MessageIn:
    """
    Contact form payload.

    :param sender_name: Visitor's name.
    :param sender_email: Visitor's reply address.
    :param body: Message text.
    :param subject: Optional subject line.
    """

    sender_name: str
    sender_email: str
    body: str
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class MessageOut:
    id: UUID
    recipient_id: UUID
    sender_name: str
    sender_email: str
    subject: str | None
    body: str
    is_read: bool
    created_at: datetime | None

    @classmethod
    def from_model(cls, row: Message) -> MessageOut:
        return cls(
            id=row.id,
            recipient_id=row.user_id,
            sender_name=row.sender_name,
            sender_email=row.sender_email,
            subject=row.subject,
            body=row.body,
            is_read=row.is_read,
            created_at=row.created_at,
        )


@dataclass(frozen=True, slots=True)
class MessagePageOut:
    items: list[MessageOut]
    meta: PageMeta
    unread: int
