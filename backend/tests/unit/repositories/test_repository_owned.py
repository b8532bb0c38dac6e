"""Owner-scoped lookups shared by every portfolio resource repository."""

from __future__ import annotations

import datetime

from portfolio.repositories import (
    EducationRepository,
    ExperienceRepository,
    MessageRepository,
    SkillRepository,
    SocialLinkRepository,
)
from tests.factories.resources import (
    EducationFactory,
    ExperienceFactory,
    MessageFactory,
    SkillFactory,
    SocialLinkFactory,
)
from tests.factories.user import UserFactory


class TestOwnedRepository:
    def test_list_by_user_id_only_returns_owned_rows(self, session):
        owner, other = UserFactory(), UserFactory()
        mine = [SocialLinkFactory(user=owner, platform=p) for p in ("LinkedIn", "GitHub")]
        SocialLinkFactory(user=other)

        rows = SocialLinkRepository().list_by_user_id(owner.id)
        assert {r.id for r in rows} == {m.id for m in mine}
        # default order is alphabetical by platform
        assert [r.platform for r in rows] == ["GitHub", "LinkedIn"]

    def test_list_by_user_id_empty_for_unknown_user(self, session, faker):
        assert EducationRepository().list_by_user_id(faker.uuid4(cast_to=None)) == []

    def test_education_newest_first(self, session):
        owner = UserFactory()
        EducationFactory(user=owner, institution="Old", start_date=datetime.date(2010, 1, 1))
        EducationFactory(user=owner, institution="New", start_date=datetime.date(2018, 1, 1))
        rows = EducationRepository().list_by_user_id(owner.id)
        assert [r.institution for r in rows] == ["New", "Old"]

    def test_explicit_sort_overrides_default(self, session):
        owner = UserFactory()
        ExperienceFactory(user=owner, company="B", start_date=datetime.date(2010, 1, 1))
        ExperienceFactory(user=owner, company="A", start_date=datetime.date(2018, 1, 1))
        rows = ExperienceRepository().list_by_user_id(owner.id, sort=["company"])
        assert [r.company for r in rows] == ["A", "B"]

    def test_get_owned(self, session):
        owner, other = UserFactory(), UserFactory()
        skill = SkillFactory(user=owner)
        repo = SkillRepository()
        assert repo.get_owned(skill.id, owner.id) is skill
        assert repo.get_owned(skill.id, other.id) is None


class TestSkillRepository:
    def test_exists_for_user_is_case_insensitive(self, session):
        owner = UserFactory()
        skill = SkillFactory(user=owner, name="PostgreSQL")
        repo = SkillRepository()

        assert repo.exists_for_user(owner.id, "postgresql") is True
        assert repo.exists_for_user(owner.id, " POSTGRESQL ") is True
        assert repo.exists_for_user(owner.id, "MySQL") is False
        assert repo.exists_for_user(owner.id, "postgresql", exclude_id=skill.id) is False

    def test_strongest_skills_first(self, session):
        owner = UserFactory()
        SkillFactory(user=owner, name="Rust", level=2)
        SkillFactory(user=owner, name="Python", level=5)
        SkillFactory(user=owner, name="Go", level=2)
        rows = SkillRepository().list_by_user_id(owner.id)
        assert [r.name for r in rows] == ["Python", "Go", "Rust"]


class TestMessageRepository:
    def test_count_unread(self, session):
        owner = UserFactory()
        MessageFactory(user=owner, is_read=False)
        MessageFactory(user=owner, is_read=True)
        MessageFactory(user=owner, is_read=False)
        MessageFactory(is_read=False)  # someone else's inbox

        assert MessageRepository().count_unread(owner.id) == 2

    def test_only_is_read_is_updatable(self, session):
        msg = MessageFactory()
        repo = MessageRepository()
        repo.update(msg, is_read=True)
        assert msg.is_read is True
        repo.assign_updates(msg, {"body": "tampered"}, strict=False)
        assert msg.body != "tampered"
