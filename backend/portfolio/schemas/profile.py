"""Profile and contact-message schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load, validate

from portfolio.schemas.common import PayloadSchema, Trimmed, not_blank
from portfolio.services.messages.dto import MessageIn
from portfolio.services.profile.dto import ProfileUpdateIn


class ProfileUpdateSchema(PayloadSchema):
    """Full replacement of the public profile fields."""

    full_name = Trimmed(load_default=None, allow_none=True, validate=validate.Length(max=100))
    headline = Trimmed(load_default=None, allow_none=True, validate=validate.Length(max=150))
    bio = Trimmed(load_default=None, allow_none=True, validate=validate.Length(max=5000))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> ProfileUpdateIn:
        return ProfileUpdateIn(**data)


class MessageSchema(PayloadSchema):
    sender_name = Trimmed(
        required=True, validate=[not_blank("Name is required."), validate.Length(max=100)]
    )
    sender_email = fields.Email(required=True, validate=validate.Length(max=254))
    subject = Trimmed(load_default=None, allow_none=True, validate=validate.Length(max=200))
    body = Trimmed(
        required=True, validate=[not_blank("Message is required."), validate.Length(max=5000)]
    )

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> MessageIn:
        return MessageIn(**data)
