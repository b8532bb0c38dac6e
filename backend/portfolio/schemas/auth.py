"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import ValidationError, fields, post_load, validate, validates_schema

from portfolio.schemas.common import PayloadSchema, Trimmed, not_blank
from portfolio.services.authentication.dto import (
    ChangePasswordIn,
    LoginIn,
    RefreshIn,
    RegisterIn,
)

PASSWORD_LENGTH = validate.Length(min=8, max=128)


class RegisterSchema(PayloadSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = Trimmed(
        required=True,
        validate=[
            validate.Length(min=3, max=50),
            validate.Regexp(r"^[A-Za-z0-9_.-]+$", error="Use letters, digits, '.', '_' or '-'."),
        ],
    )
    password = fields.String(required=True, validate=PASSWORD_LENGTH)
    full_name = Trimmed(load_default=None, allow_none=True, validate=validate.Length(max=100))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RegisterIn:
        return RegisterIn(**data)


class LoginSchema(PayloadSchema):
    """Credentials: ``email`` or ``username`` plus ``password``."""

    email = fields.Email(load_default=None, validate=validate.Length(max=254))
    username = Trimmed(load_default=None, validate=validate.Length(max=50))
    password = fields.String(required=True, validate=not_blank("Password is required."))

    @validates_schema
    def _require_identifier(self, data: dict[str, Any], **_: Any) -> None:
        if not data.get("email") and not data.get("username"):
            raise ValidationError("Provide an email or a username.", "email")

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> LoginIn:
        return LoginIn(identifier=data.get("email") or data["username"], password=data["password"])


class RefreshSchema(PayloadSchema):
    access_token = fields.String(required=True, validate=not_blank("Access token is required."))
    refresh_token = fields.String(required=True, validate=not_blank("Refresh token is required."))

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> RefreshIn:
        return RefreshIn(**data)


class ChangePasswordSchema(PayloadSchema):
    current_password = fields.String(required=True, validate=not_blank("Current password is required."))
    new_password = fields.String(required=True, validate=PASSWORD_LENGTH)

    @validates_schema
    def _must_differ(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("current_password") and data.get("current_password") == data.get("new_password"):
            raise ValidationError("New password must differ from the current one.", "new_password")

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> ChangePasswordIn:
        return ChangePasswordIn(**data)
