"""Tests for the user-owned portfolio models."""

from __future__ import annotations

import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from portfolio.models import Education, Message, Skill, User
from tests.factories.resources import (
    EducationFactory,
    ExperienceFactory,
    MessageFactory,
    ProjectFactory,
    SkillFactory,
    SocialLinkFactory,
)
from tests.factories.user import UserFactory


class TestOwnership:
    def test_resources_point_at_owner(self, session):
        user = UserFactory()
        edu = EducationFactory(user=user)
        project = ProjectFactory(user=user)
        link = SocialLinkFactory(user=user)
        assert edu.user_id == project.user_id == link.user_id == user.id

    def test_deleting_user_cascades(self, session):
        user = UserFactory()
        EducationFactory(user=user)
        SkillFactory(user=user)
        MessageFactory(user=user)
        session.commit()
        user_id = user.id

        session.delete(user)
        session.commit()

        assert session.query(Education).count() == 0
        assert session.query(Skill).count() == 0
        assert session.query(Message).count() == 0
        assert session.get(User, user_id) is None


class TestCareer:
    def test_end_before_start_rejected(self, session):
        user = UserFactory()
        session.commit()
        session.add(
            Education(
                user_id=user.id,
                institution="Uni",
                degree="BSc",
                start_date=datetime.date(2020, 1, 1),
                end_date=datetime.date(2019, 1, 1),
            )
        )
        with pytest.raises(IntegrityError):
            session.commit()

    def test_open_ended_experience_is_current(self, session):
        assert ExperienceFactory(end_date=None).is_current is True
        assert ExperienceFactory(end_date=datetime.date(2024, 1, 1)).is_current is False


class TestSkill:
    def test_name_unique_per_user(self, session):
        user = UserFactory()
        SkillFactory(user=user, name="Python")
        session.commit()

        session.add(Skill(user_id=user.id, name="Python", level=2))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_same_name_allowed_for_other_users(self, session):
        SkillFactory(name="Python")
        SkillFactory(name="Python")
        session.flush()
        assert session.query(Skill).filter_by(name="Python").count() == 2

    @pytest.mark.parametrize("level", [0, 6])
    def test_level_out_of_range_rejected(self, session, level):
        user = UserFactory()
        session.commit()
        session.add(Skill(user_id=user.id, name="Go", level=level))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_name_trimmed(self):
        assert Skill(name="  SQL ").name == "SQL"


class TestMessage:
    def test_defaults_to_unread(self, session):
        msg = MessageFactory()
        session.flush()
        session.refresh(msg)
        assert msg.is_read is False
        assert msg.created_at is not None

    def test_sender_email_normalized(self):
        assert Message(sender_email=" Visitor@Example.COM").sender_email == "visitor@example.com"
