"""Owned-resource services: public reads, owner-only writes."""

from __future__ import annotations

import datetime

import pytest

from portfolio.models import Education, Skill, SocialLink
from tests.factories.resources import (
    EducationFactory,
    ExperienceFactory,
    ProjectFactory,
    SkillFactory,
    SocialLinkFactory,
)
from tests.factories.user import UserFactory


@pytest.fixture()
def owner(session):
    user = UserFactory()
    session.commit()
    return user


@pytest.fixture()
def intruder(session):
    user = UserFactory()
    session.commit()
    return user


@pytest.fixture()
def owner_token(services, owner):
    return services.tokens.issue_access_token(owner)


@pytest.fixture()
def intruder_token(services, intruder):
    return services.tokens.issue_access_token(intruder)


# ------------------------------- Public reads ------------------------------ #
class TestReads:
    def test_list_by_user_id(self, services, owner, session):
        ProjectFactory(user=owner, title="B")
        ProjectFactory(user=owner, title="A")
        ProjectFactory()
        session.commit()

        result = services.projects.list_by_user_id(owner.id)
        assert result.is_success
        assert {p.title for p in result.value} == {"A", "B"}
        assert all(p.user_id == owner.id for p in result.value)

    def test_list_for_unknown_user_is_empty(self, services, faker):
        assert services.skills.list_by_user_id(faker.uuid4(cast_to=None)).value == []

    def test_get(self, services, session):
        exp = ExperienceFactory(end_date=None)
        session.commit()

        out = services.experiences.get(exp.id).value
        assert out.company == exp.company
        assert out.is_current is True

    def test_get_missing_is_404(self, services, faker):
        result = services.educations.get(faker.uuid4(cast_to=None))
        assert result.error.status_code == 404
        assert "Education" in result.error.message


# --------------------------------- Writes ---------------------------------- #
class TestAdd:
    def test_add_education(self, services, owner, owner_token, session):
        result = services.educations.add(
            {
                "institution": "  MIT ",
                "degree": "PhD",
                "start_date": "2010-09-01",
                "end_date": "2014-06-30",
            },
            owner_token,
        )

        assert result.is_success
        out = result.value
        assert out.institution == "MIT"
        assert out.user_id == owner.id
        assert session.get(Education, out.id).degree == "PhD"

    def test_add_social_link_with_bearer_prefix(self, services, owner, owner_token, session):
        result = services.social_links.add(
            {"platform": "GitHub", "url": "https://github.com/grace", "icon": "github"},
            "Bearer " + owner_token,
        )
        assert result.is_success
        assert session.query(SocialLink).filter_by(user_id=owner.id).count() == 1

    def test_add_requires_token(self, services):
        result = services.projects.add({"title": "Untitled"}, None)
        assert result.error.status_code == 401

    def test_add_with_invalid_token_is_400(self, services):
        result = services.projects.add({"title": "Untitled"}, "Bearer not.a.jwt")
        assert result.error.status_code == 400

    def test_add_for_deleted_user_is_404(self, services, owner, owner_token, session):
        session.delete(owner)
        session.commit()
        result = services.skills.add({"name": "Python"}, owner_token)
        assert result.error.status_code == 404

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"url": "https://example.com"}, "platform"),
            ({"platform": "GitHub"}, "url"),
            ({"platform": "GitHub", "url": "   "}, "url"),
            ({"platform": "x" * 101, "url": "https://example.com"}, "platform"),
            ({"platform": "GitHub", "url": "https://example.com/" + "x" * 200}, "url"),
            ({"platform": "GitHub", "url": "https://example.com", "icon": "x" * 201}, "icon"),
        ],
    )
    def test_social_link_validation(self, services, owner_token, payload, field):
        result = services.social_links.add(payload, owner_token)
        assert result.error.status_code == 422
        assert field in result.error.details["errors"]

    def test_end_date_before_start_date_is_422(self, services, owner_token):
        result = services.experiences.add(
            {
                "company": "Acme",
                "position": "Dev",
                "start_date": "2020-01-01",
                "end_date": "2019-01-01",
            },
            owner_token,
        )
        assert result.error.status_code == 422
        assert "end_date" in result.error.details["errors"]

    def test_skill_level_out_of_range_is_422(self, services, owner_token):
        result = services.skills.add({"name": "Python", "level": 9}, owner_token)
        assert result.error.status_code == 422

    def test_duplicate_skill_name_is_409(self, services, owner, owner_token, session):
        SkillFactory(user=owner, name="Python")
        session.commit()
        result = services.skills.add({"name": "python", "level": 4}, owner_token)
        assert result.error.status_code == 409
        assert session.query(Skill).filter_by(user_id=owner.id).count() == 1


class TestUpdate:
    def test_owner_replaces_all_fields(self, services, owner, owner_token, session):
        project = ProjectFactory(user=owner, title="Old", live_url="https://old.example.com")
        session.commit()

        result = services.projects.update({"title": "New"}, project.id, owner_token)

        assert result.is_success
        assert result.value.title == "New"
        assert result.value.live_url is None

    def test_non_owner_is_403(self, services, owner, intruder_token, session):
        edu = EducationFactory(user=owner, institution="Original")
        session.commit()

        result = services.educations.update(
            {"institution": "Hacked", "degree": "X", "start_date": "2000-01-01"},
            edu.id,
            intruder_token,
        )

        assert result.error.status_code == 403
        assert session.get(Education, edu.id).institution == "Original"

    def test_missing_entity_is_404(self, services, owner_token, faker):
        result = services.skills.update({"name": "Go"}, faker.uuid4(cast_to=None), owner_token)
        assert result.error.status_code == 404

    def test_skill_may_keep_its_own_name(self, services, owner, owner_token, session):
        skill = SkillFactory(user=owner, name="Python", level=2)
        session.commit()
        result = services.skills.update({"name": "Python", "level": 5}, skill.id, owner_token)
        assert result.is_success
        assert result.value.level == 5

    def test_skill_rename_onto_sibling_is_409(self, services, owner, owner_token, session):
        SkillFactory(user=owner, name="Python")
        other = SkillFactory(user=owner, name="Go")
        session.commit()
        result = services.skills.update({"name": "PYTHON"}, other.id, owner_token)
        assert result.error.status_code == 409


class TestDelete:
    def test_owner_deletes(self, services, owner, owner_token, session):
        link = SocialLinkFactory(user=owner)
        session.commit()
        link_id = link.id

        assert services.social_links.delete(link_id, owner_token).is_success
        session.expire_all()
        assert session.get(SocialLink, link_id) is None

    def test_non_owner_is_403(self, services, owner, intruder_token, session):
        skill = SkillFactory(user=owner)
        session.commit()

        assert services.skills.delete(skill.id, intruder_token).error.status_code == 403
        assert session.get(Skill, skill.id) is not None

    def test_missing_is_404(self, services, owner_token, faker):
        result = services.projects.delete(faker.uuid4(cast_to=None), owner_token)
        assert result.error.status_code == 404
