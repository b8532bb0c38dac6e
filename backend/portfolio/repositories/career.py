"""Repositories for résumé entries (education and experience)."""

from __future__ import annotations

from portfolio.models.career import Education, Experience
from portfolio.repositories.owned import OwnedRepository


class EducationRepository(OwnedRepository[Education]):
    """Persistence for :class:`Education`; newest studies first."""

    model = Education
    _default_sort = ("-start_date",)

    def _sortable_fields(self):
        return {
            "start_date": Education.start_date,
            "end_date": Education.end_date,
            "institution": Education.institution,
            "created_at": Education.created_at,
        }

    def _updatable_fields(self):
        return {
            "institution",
            "degree",
            "field_of_study",
            "start_date",
            "end_date",
            "description",
        }


class ExperienceRepository(OwnedRepository[Experience]):
    """Persistence for :class:`Experience`; most recent position first."""

    model = Experience
    _default_sort = ("-start_date",)

    def _sortable_fields(self):
        return {
            "start_date": Experience.start_date,
            "end_date": Experience.end_date,
            "company": Experience.company,
            "created_at": Experience.created_at,
        }

    def _updatable_fields(self):
        return {"company", "position", "location", "start_date", "end_date", "description"}
