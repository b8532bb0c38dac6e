"""Common Marshmallow building blocks shared across payload schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validates_schema


class Trimmed(fields.String):
    """String field that strips surrounding whitespace."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return super()._deserialize(value, attr, data, **kwargs).strip()


def not_blank(message: str):
    """Validator rejecting ``None`` or whitespace-only strings with ``message``."""

    def _check(value: str | None) -> None:
        if value is None or not str(value).strip():
            raise ValidationError(message)

    return _check


class PayloadSchema(Schema):
    """Base for request payloads: unknown keys are dropped."""

    class Meta:
        unknown = EXCLUDE


class DateRangeMixin:
    """Reject ``end_date`` values earlier than ``start_date``."""

    @validates_schema
    def _check_date_range(self, data: dict[str, Any], **_: Any) -> None:
        start, end = data.get("start_date"), data.get("end_date")
        if start is not None and end is not None and end < start:
            raise ValidationError("End date cannot be earlier than start date.", "end_date")


class PaginationQuerySchema(PayloadSchema):
    """Validate ``page``/``limit`` and split a comma-separated ``sort``."""

    page = fields.Integer(load_default=1)
    limit = fields.Integer(load_default=20)
    sort = fields.String(load_default="")

    def split_sort(self, raw: str | None) -> list[str]:
        return [segment.strip() for segment in (raw or "").split(",") if segment.strip()]
