"""UserRepository and RoleRepository lookups."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from portfolio.models import User
from portfolio.repositories import RoleRepository, UserRepository
from tests.factories.user import RoleFactory, UserFactory


class TestUserRepository:
    def test_get_by_email_is_case_insensitive(self, session):
        user = UserFactory(email="jane@example.com")
        assert UserRepository().get_by_email("  JANE@example.com ") is user

    def test_get_by_username(self, session):
        user = UserFactory(username="jane")
        repo = UserRepository()
        assert repo.get_by_username("jane") is user
        assert repo.get_by_username("john") is None

    def test_exists_helpers(self, session):
        UserFactory(email="x@example.com", username="xavier")
        repo = UserRepository()
        assert repo.exists_by_email("X@example.com") is True
        assert repo.exists_by_email("y@example.com") is False
        assert repo.exists_by_username("xavier") is True
        assert repo.exists_by_username("yvonne") is False

    @pytest.mark.parametrize("identifier", ["kim@example.com", "kim"])
    def test_authenticate_by_email_or_username(self, session, identifier):
        user = UserFactory(email="kim@example.com", username="kim", password="s3cret-pass")
        session.flush()
        repo = UserRepository()
        assert repo.authenticate(identifier, "s3cret-pass") is user
        assert repo.authenticate(identifier, "wrong") is None

    def test_authenticate_unknown_user(self, session):
        assert UserRepository().authenticate("ghost@example.com", "whatever") is None

    def test_update_password(self, session):
        user = UserFactory(password="old-password")
        session.flush()
        UserRepository().update_password(user.id, "new-password")
        assert user.verify_password("new-password") is True
        assert user.verify_password("old-password") is False

    def test_refresh_token_is_not_a_public_filter(self, session):
        holder = UserFactory(username="holder")
        holder.refresh_token = "secret-refresh"
        UserFactory(username="bystander")
        session.flush()

        rows = UserRepository().list(filters={"refresh_token": "secret-refresh"}, sort=["username"])
        assert [u.username for u in rows] == ["bystander", "holder"]

    def test_rotate_refresh_token_requires_current_unexpired_token(self, session):
        now = datetime.now(UTC)
        user = UserFactory()
        user.refresh_token = "current"
        user.refresh_token_expiry_time = now + timedelta(hours=1)
        session.flush()
        repo = UserRepository()

        assert repo.rotate_refresh_token(user.id, "other", "next", now + timedelta(days=7), now) is False
        later = now + timedelta(hours=2)
        assert repo.rotate_refresh_token(user.id, "current", "next", later + timedelta(days=7), later) is False
        assert repo.rotate_refresh_token(user.id, "current", "next", now + timedelta(days=7), now) is True
        assert repo.rotate_refresh_token(user.id, "current", "again", now + timedelta(days=7), now) is False

        session.expire_all()
        assert session.get(User, user.id).refresh_token == "next"

    def test_update_password_unknown_user(self, session, faker):
        with pytest.raises(ValueError):
            UserRepository().update_password(faker.uuid4(cast_to=None), "irrelevant")


class TestRoleRepository:
    def test_get_or_create(self, session):
        repo = RoleRepository()
        role, created = repo.get_or_create("Admin")
        assert created is True
        again, created_again = repo.get_or_create("Admin")
        assert created_again is False
        assert again.id == role.id

    def test_names_for_user(self, session):
        user = UserFactory(roles=[RoleFactory(name="User"), RoleFactory(name="Admin")])
        other = UserFactory()
        session.flush()

        repo = RoleRepository()
        assert repo.names_for_user(user.id) == ["Admin", "User"]
        assert repo.names_for_user(other.id) == []
