from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

DEFAULT_REFRESH_LIFETIME = timedelta(days=365)


@dataclass(frozen=True, slots=True)
class RefreshSessionView:
    """
    Read-model for a refresh session.

    :ivar id: Session identifier embedded in the refresh token.
    :ivar user_id: Owner user id.
    :ivar created_at: Creation time (UTC).
    :ivar expires_at: Absolute expiration (UTC).
    """

    id: int
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return ``True`` once ``now`` has reached ``expires_at``."""
        return self.expires_at <= (now or datetime.now(UTC))


class RefreshSessionStore(Protocol):
    """
    Persistence for refresh sessions.

    Rows are created and deleted, never updated. ``delete_by_id`` MUST be a
    single atomic delete so that, of two concurrent callers, exactly one
    observes ``True``.
    """

    def create(
        self, user_id: int, *, lifetime: timedelta = DEFAULT_REFRESH_LIFETIME
    ) -> RefreshSessionView:
        """Insert a new session row for ``user_id`` and return it."""

    def get(self, session_id: int) -> RefreshSessionView | None:
        """Fetch a single session snapshot (if present)."""

    def delete_by_id(self, session_id: int) -> bool:
        """Delete one session. :returns: True if this call removed it."""

    def list_for_user(self, user_id: int) -> list[RefreshSessionView]:
        """List the sessions of a user ordered by id."""


class InMemoryRefreshSessionStore(RefreshSessionStore):
    """
    In-memory refresh session store.

    .. note::
       Uses a threading lock to simulate atomicity in unit tests.
    """

    def __init__(self) -> None:
        self._rows: dict[int, RefreshSessionView] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def create(
        self, user_id: int, *, lifetime: timedelta = DEFAULT_REFRESH_LIFETIME
    ) -> RefreshSessionView:
        now = datetime.now(UTC)
        with self._lock:
            self._seq += 1
            view = RefreshSessionView(
                id=self._seq,
                user_id=int(user_id),
                created_at=now,
                expires_at=now + lifetime,
            )
            self._rows[view.id] = view
            return view

    def get(self, session_id: int) -> RefreshSessionView | None:
        return self._rows.get(int(session_id))

    def delete_by_id(self, session_id: int) -> bool:
        with self._lock:
            return self._rows.pop(int(session_id), None) is not None

    def list_for_user(self, user_id: int) -> list[RefreshSessionView]:
        return sorted(
            (v for v in self._rows.values() if v.user_id == int(user_id)),
            key=lambda v: v.id,
        )
