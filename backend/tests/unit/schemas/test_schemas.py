"""Payload schemas: trimming, cross-field rules and DTO construction."""

from __future__ import annotations

import datetime

import pytest
from marshmallow import ValidationError

from portfolio.schemas import (
    ChangePasswordSchema,
    EducationSchema,
    LoginSchema,
    PaginationQuerySchema,
    ProjectSchema,
    RegisterSchema,
    SkillSchema,
)
from portfolio.services.authentication.dto import LoginIn, RegisterIn
from portfolio.services.resources.dto import EducationIn, SkillIn


class TestRegisterSchema:
    def test_builds_dto_and_trims(self):
        dto = RegisterSchema().load(
            {"email": "a@example.com", "username": "  alan ", "password": "longenough"}
        )
        assert isinstance(dto, RegisterIn)
        assert dto.username == "alan"
        assert dto.full_name is None

    def test_unknown_keys_are_dropped(self):
        dto = RegisterSchema().load(
            {
                "email": "a@example.com",
                "username": "alan",
                "password": "longenough",
                "is_admin": True,
            }
        )
        assert not hasattr(dto, "is_admin")

    def test_username_charset(self):
        with pytest.raises(ValidationError) as exc:
            RegisterSchema().load(
                {"email": "a@example.com", "username": "al an", "password": "longenough"}
            )
        assert "username" in exc.value.messages


class TestLoginSchema:
    def test_email_wins_over_username(self):
        dto = LoginSchema().load(
            {"email": "a@example.com", "username": "alan", "password": "x"}
        )
        assert dto == LoginIn(identifier="a@example.com", password="x")

    def test_username_only(self):
        assert LoginSchema().load({"username": "alan", "password": "x"}).identifier == "alan"

    def test_identifier_required(self):
        with pytest.raises(ValidationError) as exc:
            LoginSchema().load({"password": "x"})
        assert "email" in exc.value.messages

    def test_blank_password_rejected(self):
        with pytest.raises(ValidationError) as exc:
            LoginSchema().load({"username": "alan", "password": "   "})
        assert exc.value.messages["password"] == ["Password is required."]


class TestChangePasswordSchema:
    def test_new_password_must_differ(self):
        with pytest.raises(ValidationError) as exc:
            ChangePasswordSchema().load(
                {"current_password": "samesame1", "new_password": "samesame1"}
            )
        assert "new_password" in exc.value.messages

    def test_short_new_password(self):
        with pytest.raises(ValidationError):
            ChangePasswordSchema().load({"current_password": "old-password", "new_password": "short"})


class TestDateRange:
    def test_same_day_is_allowed(self):
        dto = EducationSchema().load(
            {
                "institution": "Uni",
                "degree": "BSc",
                "start_date": "2020-01-01",
                "end_date": "2020-01-01",
            }
        )
        assert isinstance(dto, EducationIn)
        assert dto.end_date == datetime.date(2020, 1, 1)

    def test_open_ended(self):
        dto = EducationSchema().load(
            {"institution": "Uni", "degree": "BSc", "start_date": "2020-01-01"}
        )
        assert dto.end_date is None

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc:
            EducationSchema().load(
                {
                    "institution": "Uni",
                    "degree": "BSc",
                    "start_date": "2020-01-02",
                    "end_date": "2020-01-01",
                }
            )
        assert "end_date" in exc.value.messages


class TestSkillSchema:
    def test_level_defaults_to_minimum(self):
        assert SkillSchema().load({"name": "SQL"}) == SkillIn(name="SQL", level=1)

    @pytest.mark.parametrize("level", [0, 6])
    def test_level_range(self, level):
        with pytest.raises(ValidationError):
            SkillSchema().load({"name": "SQL", "level": level})


class TestProjectSchema:
    def test_urls_validated(self):
        with pytest.raises(ValidationError) as exc:
            ProjectSchema().load({"title": "Site", "live_url": "not a url"})
        assert "live_url" in exc.value.messages

    def test_blank_title(self):
        with pytest.raises(ValidationError) as exc:
            ProjectSchema().load({"title": "  "})
        assert exc.value.messages["title"] == ["Title is required."]


class TestPaginationQuerySchema:
    def test_defaults(self):
        assert PaginationQuerySchema().load({}) == {"page": 1, "limit": 20, "sort": ""}

    def test_split_sort(self):
        assert PaginationQuerySchema().split_sort(" -created_at, ,is_read ") == [
            "-created_at",
            "is_read",
        ]
