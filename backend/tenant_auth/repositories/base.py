"""Generic repository base and query utilities for SQLAlchemy 2.x.

Repositories are persistence-only: they add, load, page and delete rows but
never commit. Transactions belong to the unit of work opened by a service.

Sorting and equality filters are whitelisted per aggregate through
``_sortable_fields`` and ``_filterable_fields``; anything else a caller sends
is dropped before it reaches SQL.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from tenant_auth.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


@dataclass(slots=True)
class Pagination:
    """Pagination input parameters.

    :param page: 1-based page number.
    :param limit: Page size.
    :param sort: Public sort tokens (e.g. ``["-created_at", "email"]``).
    """

    page: int
    limit: int
    sort: list[str]


@dataclass(slots=True)
class Page(Generic[E]):
    """One page of entities plus the total matching row count."""

    items: Sequence[E]
    total: int
    page: int
    limit: int


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Turn ``["-created_at", "email"]`` into ``[("created_at", True), ("email", False)]``."""
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        name = (token[1:] if is_desc else token).strip()
        if name:
            parsed.append((name, is_desc))
    return parsed


def _apply_sorting(
    stmt: Select[Any],
    sortable: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Order ``stmt`` by the whitelisted tokens, then by primary key.

    Unknown tokens are ignored. The trailing primary-key order keeps page
    boundaries stable when the requested columns tie.
    """
    orders = [
        col.desc() if is_desc else col.asc()
        for name, is_desc in parse_sort_tokens(tokens)
        if isinstance(col := sortable.get(name), InstrumentedAttribute)
    ]
    if pk_attr is not None:
        orders.append(pk_attr.asc())
    return stmt.order_by(*orders) if orders else stmt


def paginate_select(
    session: Session, stmt: Select[Any], *, page: int, limit: int
) -> tuple[list[Any], int]:
    """Run ``stmt`` for one page and count every matching row.

    :returns: ``(items, total)``.
    """
    page = max(int(page), 1)
    limit = max(int(limit), 1)
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = int(session.execute(count_stmt).scalar_one())
    items = list(session.execute(stmt.limit(limit).offset((page - 1) * limit)).scalars().all())
    return items, total


class BaseRepository(Generic[E]):
    """Persistence-only repository for a single aggregate.

    Subclasses set ``model`` and may override ``_sortable_fields`` and
    ``_filterable_fields``.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Injected session, or the Flask-scoped one when none was given."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Whitelists -------------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Public sort key → column. Empty means "primary key order only"."""
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Public filter key → column for equality filters."""
        return {}

    def _apply_equality_filters(
        self, stmt: Select[Any], filters: Mapping[str, Any] | None
    ) -> Select[Any]:
        allowed = self._filterable_fields()
        for key, value in (filters or {}).items():
            col = allowed.get(key)
            if isinstance(col, InstrumentedAttribute):
                stmt = stmt.where(col == value)
        return stmt

    # --------------------------------- Writes --------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is populated."""
        self.session.add(instance)
        self.flush()
        return instance

    def delete_by_pk(self, entity_id: Any) -> int:
        """Delete a row by primary key with a single ``DELETE`` statement.

        Bypasses the identity map so concurrent deleters race on the database
        row itself; only one of them observes a ``rowcount`` of 1.

        :returns: Number of rows removed (0 or 1).
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError(f"{type(self).__name__}.delete_by_pk requires an 'id' column.")
        stmt = delete(self.model).where(pk_attr == entity_id)
        result = self.session.execute(stmt, execution_options={"synchronize_session": False})
        return int(result.rowcount or 0)

    def flush(self) -> None:
        self.session.flush()

    # --------------------------------- Reads ---------------------------------

    def get(self, entity_id: Any) -> E | None:
        """Load one entity by primary key, or ``None``."""
        return cast(E | None, self.session.get(self.model, entity_id))

    def paginate(
        self, pagination: Pagination, *, filters: Mapping[str, Any] | None = None
    ) -> Page[E]:
        """Return one page of entities matching ``filters``, sorted safely."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        stmt = _apply_sorting(
            stmt, self._sortable_fields(), pagination.sort, pk_attr=self._pk_attr()
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(
            items=cast(list[E], items),
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )
