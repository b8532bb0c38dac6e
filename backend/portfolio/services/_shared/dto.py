# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass

from portfolio.repositories.base import Page


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :param limit: Page size.
    :param total: Total rows available.
    :param has_prev: Whether a previous page exists.
    :param has_next: Whether a next page exists.
    """

    page: int
    limit: int
    total: int
    has_prev: bool
    has_next: bool

    @classmethod
    def from_page(cls, page: Page) -> PageMeta:
        return cls(
            page=page.page,
            limit=page.limit,
            total=page.total,
            has_prev=page.page > 1,
            has_next=page.page * page.limit < page.total,
        )
