# comments in English; reST docstrings
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from tenant_auth.models.refresh_session import RefreshSession
from tenant_auth.services._shared.errors import PersistenceError
from tenant_auth.services._shared.ports import (
    DEFAULT_REFRESH_LIFETIME,
    RefreshSessionStore,
    RefreshSessionView,
)
from tenant_auth.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _view(row: RefreshSession) -> RefreshSessionView:
    return RefreshSessionView(
        id=row.id,
        user_id=row.user_id,
        created_at=_aware(row.created_at),
        expires_at=_aware(row.expires_at),
    )


class SQLAlchemyRefreshSessionStore(RefreshSessionStore):
    """
    Relational refresh session store (``refresh_sessions`` table).

    Every call commits in its own read-write unit of work, so a created row is
    visible to other workers before the refresh token leaves the process, and a
    delete is final as soon as it returns.
    """

    def create(
        self, user_id: int, *, lifetime: timedelta = DEFAULT_REFRESH_LIFETIME
    ) -> RefreshSessionView:
        now = datetime.now(UTC)
        try:
            with SQLAlchemyUnitOfWork() as uow:
                row = RefreshSession(user_id=int(user_id), expires_at=now + lifetime)
                uow.refresh_sessions.add(row)
                view = RefreshSessionView(
                    id=row.id,
                    user_id=row.user_id,
                    created_at=now,
                    expires_at=now + lifetime,
                )
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to create refresh session") from exc
        return view

    def get(self, session_id: int) -> RefreshSessionView | None:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                row = uow.refresh_sessions.get(int(session_id))
                view = _view(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to read refresh session") from exc
        return view

    def delete_by_id(self, session_id: int) -> bool:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                removed = uow.refresh_sessions.delete_by_id(int(session_id))
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to delete refresh session") from exc
        return removed

    def list_for_user(self, user_id: int) -> list[RefreshSessionView]:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                views = [_view(row) for row in uow.refresh_sessions.list_for_user(int(user_id))]
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to list refresh sessions") from exc
        return views
