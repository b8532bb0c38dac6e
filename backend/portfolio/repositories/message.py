"""Message repository."""

from __future__ import annotations

from uuid import UUID

from portfolio.models.message import Message
from portfolio.repositories.owned import OwnedRepository


class MessageRepository(OwnedRepository[Message]):
    """Persistence for inbound :class:`Message` rows; newest first."""

    model = Message

    def _sortable_fields(self):
        return {"created_at": Message.created_at, "is_read": Message.is_read}

    def _filterable_fields(self):
        return {"user_id": Message.user_id, "is_read": Message.is_read}

    def _updatable_fields(self):
        return {"is_read"}

    def count_unread(self, user_id: UUID) -> int:
        return self.count(user_id=user_id, is_read=False)
