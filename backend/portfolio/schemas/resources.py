"""Payload schemas for the portfolio sub-resources."""

from __future__ import annotations

from typing import Any

from marshmallow import fields, post_load, validate

from portfolio.models.showcase import SKILL_LEVEL_MAX, SKILL_LEVEL_MIN
from portfolio.schemas.common import DateRangeMixin, PayloadSchema, Trimmed, not_blank
from portfolio.services.resources.dto import (
    EducationIn,
    ExperienceIn,
    ProjectIn,
    SkillIn,
    SocialLinkIn,
)


def _required(name: str, max_len: int) -> Trimmed:
    return Trimmed(
        required=True,
        validate=[not_blank(f"{name} is required."), validate.Length(max=max_len)],
    )


def _optional(max_len: int | None = None) -> Trimmed:
    return Trimmed(
        load_default=None,
        allow_none=True,
        validate=validate.Length(max=max_len) if max_len else None,
    )


def _optional_url() -> fields.Url:
    return fields.Url(load_default=None, allow_none=True, validate=validate.Length(max=200))


class EducationSchema(DateRangeMixin, PayloadSchema):
    institution = _required("Institution", 150)
    degree = _required("Degree", 150)
    field_of_study = _optional(150)
    start_date = fields.Date(required=True)
    end_date = fields.Date(load_default=None, allow_none=True)
    description = _optional()

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> EducationIn:
        return EducationIn(**data)


class ExperienceSchema(DateRangeMixin, PayloadSchema):
    company = _required("Company", 150)
    position = _required("Position", 150)
    location = _optional(150)
    start_date = fields.Date(required=True)
    end_date = fields.Date(load_default=None, allow_none=True)
    description = _optional()

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> ExperienceIn:
        return ExperienceIn(**data)


class ProjectSchema(PayloadSchema):
    title = _required("Title", 150)
    description = _optional()
    technologies = _optional(300)
    repository_url = _optional_url()
    live_url = _optional_url()
    image_url = _optional_url()

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> ProjectIn:
        return ProjectIn(**data)


class SkillSchema(PayloadSchema):
    name = _required("Name", 100)
    level = fields.Integer(
        load_default=SKILL_LEVEL_MIN,
        validate=validate.Range(min=SKILL_LEVEL_MIN, max=SKILL_LEVEL_MAX),
    )
    category = _optional(100)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> SkillIn:
        return SkillIn(**data)


class SocialLinkSchema(PayloadSchema):
    """Platform and URL are required (100 and 200 chars max); icon is optional."""

    platform = _required("Platform", 100)
    url = Trimmed(
        required=True,
        validate=[not_blank("URL is required."), validate.Length(max=200)],
    )
    icon = _optional(200)

    @post_load
    def make_dto(self, data: dict[str, Any], **_: Any) -> SocialLinkIn:
        return SocialLinkIn(**data)
