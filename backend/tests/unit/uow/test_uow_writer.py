"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from portfolio.models import User
from portfolio.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = db.session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert db.session.query(User).count() == initial + 1

    def test_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception escapes the block
        THEN nothing is persisted and the exception propagates.
        """
        initial = db.session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert db.session.query(User).count() == initial

    def test_repositories_share_the_session(self, db, session):
        """
        GIVEN a writer UoW
        THEN every repository it exposes works on the same session.
        """
        with SQLAlchemyUnitOfWork() as uow:
            sessions = {
                id(repo.session)
                for repo in (
                    uow.users,
                    uow.roles,
                    uow.educations,
                    uow.experiences,
                    uow.projects,
                    uow.skills,
                    uow.social_links,
                    uow.messages,
                )
            }
        assert sessions == {id(db.session)}
