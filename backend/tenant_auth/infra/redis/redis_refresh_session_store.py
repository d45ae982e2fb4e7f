# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from tenant_auth.services._shared.errors import PersistenceError
from tenant_auth.services._shared.ports import (
    DEFAULT_REFRESH_LIFETIME,
    RefreshSessionStore,
    RefreshSessionView,
)


@dataclass(slots=True)
class RedisRefreshSessionStore(RefreshSessionStore):
    """
    Redis-backed refresh session store.

    Layout:

    * ``rs:seq`` counter (``INCR``) hands out integer session ids.
    * ``rs:{id}`` hash with ``user_id``, ``created_at``, ``expires_at``; the key
      carries a TTL equal to the session lifetime.
    * ``rs:u:{user_id}`` sorted set of the user's session ids scored by their
      expiry timestamp. Members past their score are trimmed on every create
      and list, and the set itself expires with its longest-lived member.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    SEQ_KEY = "rs:seq"

    @staticmethod
    def _k(session_id: int | str) -> str:
        return f"rs:{session_id}"

    @staticmethod
    def _ku(user_id: int | str) -> str:
        return f"rs:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        return int(dt.timestamp())

    @staticmethod
    def _view(session_id: int, h: dict[bytes, bytes]) -> RefreshSessionView:
        return RefreshSessionView(
            id=int(session_id),
            user_id=int(h[b"user_id"]),
            created_at=datetime.fromtimestamp(int(h[b"created_at"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(h[b"expires_at"]), tz=UTC),
        )

    # -------------------- API ------------------------

    def create(
        self, user_id: int, *, lifetime: timedelta = DEFAULT_REFRESH_LIFETIME
    ) -> RefreshSessionView:
        """Allocate an id and write the session hash plus user index in one transaction."""
        now = datetime.now(UTC)
        expires_at = now + lifetime
        ttl = max(1, int(lifetime.total_seconds()))
        index = self._ku(user_id)
        try:
            session_id = int(self.r.incr(self.SEQ_KEY))
            key = self._k(session_id)
            index_ttl = int(self.r.ttl(index))
            pipe = self.r.pipeline(transaction=True)
            pipe.hset(
                key,
                mapping={
                    "user_id": str(user_id),
                    "created_at": str(self._to_ts(now)),
                    "expires_at": str(self._to_ts(expires_at)),
                },
            )
            pipe.expire(key, ttl)
            pipe.zremrangebyscore(index, "-inf", self._to_ts(now))
            pipe.zadd(index, {str(session_id): self._to_ts(expires_at)})
            if index_ttl < ttl:
                pipe.expire(index, ttl)
            pipe.execute()
        except RedisError as exc:
            raise PersistenceError("Failed to create refresh session") from exc
        return RefreshSessionView(
            id=session_id,
            user_id=int(user_id),
            created_at=datetime.fromtimestamp(self._to_ts(now), tz=UTC),
            expires_at=datetime.fromtimestamp(self._to_ts(expires_at), tz=UTC),
        )

    def get(self, session_id: int) -> RefreshSessionView | None:
        try:
            h = self.r.hgetall(self._k(session_id))
        except RedisError as exc:
            raise PersistenceError("Failed to read refresh session") from exc
        if not h:
            return None
        return self._view(int(session_id), h)

    def delete_by_id(self, session_id: int) -> bool:
        """
        Remove the session hash with a single ``DEL``.

        Only the caller whose ``DEL`` reports 1 removed the row; a concurrent
        caller sees 0.
        """
        key = self._k(session_id)
        try:
            uid_b = self.r.hget(key, "user_id")
            pipe = self.r.pipeline(transaction=True)
            pipe.delete(key)
            if uid_b:
                pipe.zrem(self._ku(uid_b.decode()), str(int(session_id)))
            deleted = pipe.execute()[0]
        except RedisError as exc:
            raise PersistenceError("Failed to delete refresh session") from exc
        return int(deleted) == 1

    def list_for_user(self, user_id: int) -> list[RefreshSessionView]:
        index = self._ku(user_id)
        now_ts = self._to_ts(datetime.now(UTC))
        try:
            self.r.zremrangebyscore(index, "-inf", now_ts)
            ids = sorted(int(m) for m in self.r.zrange(index, 0, -1))
            views: list[RefreshSessionView] = []
            for session_id in ids:
                h = self.r.hgetall(self._k(session_id))
                if h:
                    views.append(self._view(session_id, h))
                else:
                    self.r.zrem(index, str(session_id))
        except RedisError as exc:
            raise PersistenceError("Failed to list refresh sessions") from exc
        return views
