"""Generic repository base and query utilities for SQLAlchemy 2.x.

Persistence-only concerns shared by every portfolio repository:

- Whitelisted equality filters, sorting and update fields (no mass assignment,
  no arbitrary ``ORDER BY`` injection).
- Deterministic ordering: the primary key is always the final tiebreaker.
- Optional total counting for paginated listings.

Repositories never commit or roll back. The unit of work owns the
transaction; repositories only ``flush`` so generated keys and constraint
violations surface early.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from portfolio.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


@dataclass(slots=True)
class Pagination:
    """1-based page request with public sort tokens (``["-created_at"]``)."""

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """A slice of results with the metadata needed to render pagers."""

    items: Sequence[E]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse ``["-created_at", "name"]`` into ``[("created_at", True), ("name", False)]``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply whitelisted ``ORDER BY`` clauses followed by the primary key.

    Unknown tokens are ignored.

    :param stmt: Base selectable.
    :param sortable_fields: Public field name to ORM attribute mapping.
    :param tokens: Public sort tokens.
    :param pk_attr: Primary-key attribute appended as ascending tiebreaker.
    :returns: The ordered select.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())
    if pk_attr is not None:
        orders.append(pk_attr.asc())
    return stmt.order_by(*orders) if orders else stmt


def paginate_select(
    session: Session,
    stmt: Select[Any],
    *,
    page: int,
    limit: int,
    with_total: bool = True,
) -> tuple[list[Any], int]:
    """Execute ``stmt`` for one page and optionally count all matching rows.

    ``page`` and ``limit`` are clamped to ``>= 1``. The count query strips the
    ordering of ``stmt``. ``total`` is ``0`` when ``with_total`` is false.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)

    total = 0
    if with_total:
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = int(session.execute(count_stmt).scalar_one())

    sliced = stmt.limit(limit).offset((page - 1) * limit)
    return list(session.execute(sliced).scalars().all()), total


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single mapped entity.

    Subclasses set ``model`` and narrow behaviour through three whitelists:

    * ``_sortable_fields``: public sort key to column.
    * ``_filterable_fields``: public filter key to column. Keys outside the
      whitelist are ignored.
    * ``_updatable_fields``: attribute names :meth:`assign_updates` may set.

    ``_default_eagerload`` can attach loader options to every query.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        # Falls back to the Flask-scoped session when none is injected
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    # ------------------------------ Internals --------------------------------

    def _select(self, filters: Mapping[str, Any] | None = None) -> Select[Any]:
        stmt: Select[Any] = select(self.model)
        if filters:
            allowed = self._filterable_fields()
            clauses = [
                allowed[key] == value
                for key, value in filters.items()
                if isinstance(allowed.get(key), InstrumentedAttribute)
            ]
            if clauses:
                stmt = stmt.where(*clauses)
        return self._default_eagerload(stmt)

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Keep only whitelisted keys.

        :raises ValueError: With ``strict`` when unknown keys are present or
            the repository exposes no updatable fields at all.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown and strict:
            if not allowed:
                raise ValueError("No updatable fields configured for this repository.")
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so defaults and the PK materialize."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__}.get requires a primary key attribute.")
        stmt = self._default_eagerload(select(self.model).where(pk_attr == entity_id))
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def get_for_update(self, entity_id: Any) -> E | None:
        """Like :meth:`get` with ``SELECT ... FOR UPDATE`` where the dialect supports it."""
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(
                f"{type(self).__name__}.get_for_update requires a primary key attribute."
            )
        stmt = self._default_eagerload(
            select(self.model).where(pk_attr == entity_id)
        ).with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        return cast(E | None, self.session.execute(self._select(filters)).scalars().first())

    def exists(self, **filters: Any) -> bool:
        return self.session.execute(self._select(filters).limit(1)).first() is not None

    def count(self, **filters: Any) -> int:
        stmt = select(func.count()).select_from(self._select(filters).subquery())
        return int(self.session.execute(stmt).scalar_one())

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign whitelisted ``fields`` via ``setattr`` so ``@validates`` hooks run."""
        for key, value in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance

    def update(self, instance: E, **fields: Any) -> E:
        return self.assign_updates(instance, fields, strict=True, flush=True)

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[E]:
        stmt = apply_sorting(
            self._select(filters), self._sortable_fields(), sort or [], pk_attr=self._pk_attr()
        )
        if limit is not None:
            stmt = stmt.limit(int(limit))
        if offset is not None:
            stmt = stmt.offset(int(offset))
        return cast(list[E], list(self.session.execute(stmt).scalars().all()))

    def paginate(
        self,
        pagination: Pagination,
        *,
        filters: Mapping[str, Any] | None = None,
        with_total: bool = True,
    ) -> Page[E]:
        stmt = apply_sorting(
            self._select(filters),
            self._sortable_fields(),
            pagination.sort,
            pk_attr=self._pk_attr(),
        )
        items, total = paginate_select(
            self.session,
            stmt,
            page=pagination.page,
            limit=pagination.limit,
            with_total=with_total,
        )
        return Page(
            items=cast(list[E], items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )
