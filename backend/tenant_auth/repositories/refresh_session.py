"""Refresh session repository (insert / lookup / delete only)."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select

from tenant_auth.models.refresh_session import RefreshSession
from tenant_auth.repositories.base import BaseRepository


class RefreshSessionRepository(BaseRepository[RefreshSession]):
    """Persistence-only repository for :class:`RefreshSession`."""

    model = RefreshSession

    def list_for_user(self, user_id: int) -> Sequence[RefreshSession]:
        """Return every session row owned by ``user_id`` ordered by id."""
        stmt = (
            select(RefreshSession)
            .where(RefreshSession.user_id == user_id)
            .order_by(RefreshSession.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def delete_by_id(self, session_id: int) -> bool:
        """Delete one row; ``True`` when this call removed it."""
        return self.delete_by_pk(session_id) == 1
