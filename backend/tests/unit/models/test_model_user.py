"""Tests for the User and Role models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from portfolio.models import Role, User
from tests.factories.user import RoleFactory, UserFactory


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com", username="tester")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False
        assert "secret123" not in u.password_hash

    def test_password_is_write_only(self):
        u = User(email="a@example.com", username="u1")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(email="a@example.com", username="u1")
        with pytest.raises(ValueError):
            u.password = ""

    def test_id_is_uuid_generated_on_flush(self, session):
        u = UserFactory()
        assert u.id is not None
        assert len(str(u.id)) == 36

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="  Alice@Example.com ", username="alice")
        u1.password = "pw"
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com", username="alice2")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()

    def test_username_unique(self, session):
        UserFactory(username="bob")
        session.commit()

        u2 = User(email="b2@example.com", username="bob")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()

    @pytest.mark.parametrize("email", ["", "no-at-sign", "user@localhost"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email, username="u")

    def test_blank_username_rejected(self):
        with pytest.raises(ValueError):
            User(email="ok@example.com", username="   ")


class TestRefreshState:
    def test_no_session_by_default(self, session):
        u = UserFactory()
        assert u.refresh_token is None
        assert u.refresh_expires_at is None
        assert u.has_active_refresh_token() is False

    def test_active_until_expiry(self):
        now = datetime(2025, 1, 1, tzinfo=UTC)
        u = User(email="r@example.com", username="r")
        u.refresh_token = "abc"
        u.refresh_token_expiry_time = now + timedelta(days=1)
        assert u.has_active_refresh_token(now) is True
        assert u.has_active_refresh_token(now + timedelta(days=2)) is False

    def test_naive_expiry_is_read_as_utc(self):
        u = User(email="n@example.com", username="n")
        u.refresh_token_expiry_time = datetime(2030, 5, 1, 12, 0)
        assert u.refresh_expires_at == datetime(2030, 5, 1, 12, 0, tzinfo=UTC)

    def test_expiry_survives_round_trip(self, session):
        expires = datetime.now(UTC) + timedelta(days=7)
        u = UserFactory()
        u.refresh_token = "token"
        u.refresh_token_expiry_time = expires
        session.commit()
        session.expire_all()

        reloaded = session.get(User, u.id)
        assert reloaded.refresh_expires_at == expires


class TestRoles:
    def test_role_names_sorted(self, session):
        user = UserFactory(roles=[RoleFactory(name="User"), RoleFactory(name="Admin")])
        session.flush()
        assert user.role_names == ["Admin", "User"]

    def test_role_name_unique(self, session):
        session.add(Role(name="Editor"))
        session.commit()
        session.add(Role(name="Editor"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_role_name_required(self):
        with pytest.raises(ValueError):
            Role(name="  ")
