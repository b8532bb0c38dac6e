from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from portfolio.models.message import Message
from portfolio.schemas.common import PaginationQuerySchema
from portfolio.schemas.profile import MessageSchema
from portfolio.services._shared.base import BaseService
from portfolio.services._shared.dto import PageMeta
from portfolio.services._shared.errors import NotFoundError
from portfolio.services._shared.result import Result
from portfolio.services.messages.dto import MessageIn, MessageOut, MessagePageOut


class MessageService(BaseService):
    """
    Contact messages left by visitors on a portfolio.

    Anyone may :meth:`send`; only the recipient may list, mark or delete.
    """

    DEFAULT_SORT = ("-created_at",)

    def send(self, recipient_id: UUID, payload: Mapping[str, Any] | None) -> Result[MessageOut]:
        return self.execute(
            "message.send",
            lambda: self._send(recipient_id, MessageSchema().load(self.payload(payload))),
        )

    def _send(self, recipient_id: UUID, dto: MessageIn) -> MessageOut:
        with self.rw_uow() as uow:
            if uow.users.get(recipient_id) is None:
                raise NotFoundError("User", recipient_id)
            row = uow.messages.add(
                Message(
                    user_id=recipient_id,
                    sender_name=dto.sender_name,
                    sender_email=dto.sender_email,
                    subject=dto.subject,
                    body=dto.body,
                )
            )
            out = MessageOut.from_model(row)
        self.log.info("message.received id=%s recipient_id=%s", out.id, recipient_id)
        return out

    def list_for_owner(
        self, access_token: str | None, query: Mapping[str, Any] | None = None
    ) -> Result[MessagePageOut]:
        """Page through the caller's inbox, newest first unless ``sort`` says otherwise."""
        return self.execute("message.list", lambda: self._list_for_owner(access_token, query))

    def _list_for_owner(
        self, access_token: str | None, query: Mapping[str, Any] | None
    ) -> MessagePageOut:
        user_id = self.current_user_id(access_token)
        schema = PaginationQuerySchema()
        params = schema.load(self.payload(query))
        pagination = self.ensure_pagination(
            page=params["page"],
            limit=params["limit"],
            sort=schema.split_sort(params["sort"]) or self.DEFAULT_SORT,
        )
        with self.ro_uow() as uow:
            page = uow.messages.paginate(pagination, filters={"user_id": user_id})
            return MessagePageOut(
                items=[MessageOut.from_model(row) for row in page.items],
                meta=PageMeta.from_page(page),
                unread=uow.messages.count_unread(user_id),
            )

    def mark_read(
        self, message_id: UUID, access_token: str | None, *, is_read: bool = True
    ) -> Result[MessageOut]:
        return self.execute(
            "message.mark_read", lambda: self._mark_read(message_id, access_token, is_read)
        )

    def _mark_read(self, message_id: UUID, access_token: str | None, is_read: bool) -> MessageOut:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            row = uow.messages.get(message_id)
            if row is None:
                raise NotFoundError("Message", message_id)
            self.ensure_owner(user_id, row.user_id, msg="You can only manage your own messages.")
            uow.messages.update(row, is_read=is_read)
            return MessageOut.from_model(row)

    def delete(self, message_id: UUID, access_token: str | None) -> Result[None]:
        return self.execute("message.delete", lambda: self._delete(message_id, access_token))

    def _delete(self, message_id: UUID, access_token: str | None) -> None:
        user_id = self.current_user_id(access_token)
        with self.rw_uow() as uow:
            row = uow.messages.get(message_id)
            if row is None:
                raise NotFoundError("Message", message_id)
            self.ensure_owner(user_id, row.user_id, msg="You can only manage your own messages.")
            uow.messages.delete(row)
        self.log.info("message.deleted id=%s", message_id)
