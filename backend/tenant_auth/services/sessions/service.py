# tenant_auth/services/sessions/service.py
from __future__ import annotations

import logging

from tenant_auth.services._shared.base import BaseService, ServiceContext
from tenant_auth.services._shared.errors import AuthError, InvalidTokenError
from tenant_auth.services._shared.ports import (
    Principal,
    RefreshSessionStore,
    TokenCodec,
    UserDirectory,
)
from tenant_auth.services.sessions.dto import (
    SessionConfig,
    TokenClaims,
    TokenPairOut,
    is_numeric_id,
)

log = logging.getLogger(__name__)

INACTIVE_SESSION = "Refresh session is no longer active"


class SessionService(BaseService):
    """
    Session lifecycle service (issue / refresh / end / verify).

    Each refresh token is bound to exactly one refresh session row. A row is
    ``ACTIVE`` until it is either rotated (refresh) or revoked (logout); both
    transitions delete it, so a replayed refresh token finds no row and is
    rejected although its signature is still valid.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        store: RefreshSessionStore,
        directory: UserDirectory | None = None,
        config: SessionConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter signing and verifying JWTs.
        :param store: Persistence for refresh session rows.
        :param directory: User lookup used on refresh; defaults to
            :class:`~tenant_auth.services.identity.service.IdentityService`.
        :param config: Refresh session lifetime.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.codec = codec
        self.store = store
        if directory is None:
            from tenant_auth.services.identity.service import IdentityService

            directory = IdentityService(ctx=ctx)
        self.directory = directory
        self.cfg = config or SessionConfig()

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_session(self, user: Principal) -> TokenPairOut:
        """
        Issue an access/refresh pair for a freshly authenticated user.

        The refresh session row is persisted *before* the refresh token is
        signed, so no token exists without its server-side record. Other
        sessions of the same user are left untouched.

        :param user: Object exposing ``id`` and ``role``.
        :returns: Token pair bound to the new session.
        """
        claims = TokenClaims(sub=str(user.id), role=user.role)
        access = self.codec.issue_access_token(claims)

        row = self.store.create(user.id, lifetime=self.cfg.refresh_lifetime)
        refresh = self.codec.issue_refresh_token(
            TokenClaims(sub=claims.sub, role=claims.role, session_id=str(row.id))
        )
        log.info("session.issued", extra={"user_id": user.id, "session_id": row.id})
        return TokenPairOut(
            access_token=access, refresh_token=refresh, user_id=user.id, session_id=row.id
        )

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh_session(self, claims: TokenClaims) -> TokenPairOut:
        """
        Rotate the refresh session named by ``claims`` and emit a new pair.

        :param claims: Claims returned by :meth:`verify_refresh_token`.
        :returns: New token pair bound to a new session row.
        :raises InvalidTokenError: If the session was rotated, revoked, expired
            or does not belong to ``claims.sub``, or if a concurrent refresh or
            logout consumed it first.
        :raises AuthError: If the user no longer exists. Checked before the
            session row, since deleting a user also deletes its rows.
        """
        old_id = self._session_id(claims.session_id)

        principal = self.directory.get_principal(claims.user_id)
        if principal is None:
            log.warning("session.refresh_unknown_user", extra={"user_id": claims.sub})
            raise AuthError()

        current = self.store.get(old_id)
        if current is None or current.user_id != claims.user_id or current.is_expired():
            log.warning(
                "session.refresh_rejected", extra={"user_id": claims.sub, "session_id": old_id}
            )
            raise InvalidTokenError(INACTIVE_SESSION)

        new_row = self.store.create(principal.id, lifetime=self.cfg.refresh_lifetime)
        if not self.store.delete_by_id(old_id):
            # Lost the race against another refresh or a logout
            self.store.delete_by_id(new_row.id)
            log.warning(
                "session.rotation_lost", extra={"user_id": principal.id, "session_id": old_id}
            )
            raise InvalidTokenError(INACTIVE_SESSION)

        fresh = TokenClaims(sub=str(principal.id), role=principal.role)
        access = self.codec.issue_access_token(fresh)
        refresh = self.codec.issue_refresh_token(
            TokenClaims(sub=fresh.sub, role=fresh.role, session_id=str(new_row.id))
        )
        log.info(
            "session.rotated",
            extra={"user_id": principal.id, "old_session_id": old_id, "session_id": new_row.id},
        )
        return TokenPairOut(
            access_token=access,
            refresh_token=refresh,
            user_id=principal.id,
            session_id=new_row.id,
        )

    # ------------------------------------------------------------------ #
    # End
    # ------------------------------------------------------------------ #

    def end_session(self, session_id: int | str | None) -> None:
        """
        Revoke a refresh session. Ending an already-ended session succeeds.

        :param session_id: Session id from a verified refresh token.
        :raises InvalidTokenError: If ``session_id`` is not an integer id.
        """
        sid = self._session_id(session_id)
        removed = self.store.delete_by_id(sid)
        log.info("session.ended", extra={"session_id": sid, "removed": removed})

    # ------------------------------------------------------------------ #
    # Verification (delegates to the codec)
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> TokenClaims:
        return self.codec.verify_access_token(token)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self.codec.verify_refresh_token(token)

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _session_id(raw: int | str | None) -> int:
        """Ensure the session id can be treated as an integer row id."""
        if isinstance(raw, bool):
            raise InvalidTokenError("Invalid session id")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str) and is_numeric_id(raw):
            return int(raw)
        raise InvalidTokenError("Invalid session id")
