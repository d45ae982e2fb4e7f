# tenant_auth/services/auth/service.py
from __future__ import annotations

import logging

from tenant_auth.services._shared.base import BaseService, ServiceContext
from tenant_auth.services._shared.errors import AuthError
from tenant_auth.services.auth.dto import AuthResultOut
from tenant_auth.services.identity.dto import UserAuthIn, UserPublicOut, UserRegisterIn
from tenant_auth.services.identity.service import IdentityService
from tenant_auth.services.sessions.dto import TokenClaims
from tenant_auth.services.sessions.service import SessionService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Handler-facing authentication flows (register / login / whoami).

    Credential checks and user persistence are delegated to
    :class:`IdentityService`; tokens and refresh sessions to
    :class:`SessionService`.
    """

    def __init__(
        self,
        *,
        sessions: SessionService,
        identity: IdentityService | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param sessions: Session manager issuing the token pair.
        :param identity: User aggregate service; a default instance is built
            when omitted.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.sessions = sessions
        self.identity = identity or IdentityService(ctx=ctx)

    def register(self, dto: UserRegisterIn) -> AuthResultOut:
        """
        Register a customer and sign them in.

        :param dto: Registration input.
        :returns: New user id and token pair.
        :raises ConflictError: If the email is taken.
        """
        user = self.identity.register_customer(dto)
        tokens = self.sessions.issue_session(user)
        return AuthResultOut(user_id=user.id, tokens=tokens)

    def login(self, dto: UserAuthIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        No refresh session is created when authentication fails.

        :param dto: Login input.
        :returns: User id and token pair.
        :raises AuthError: If credentials are invalid.
        """
        try:
            principal = self.identity.authenticate(dto)
        except AuthError:
            log.warning("auth.login_failed")
            raise
        tokens = self.sessions.issue_session(principal)
        log.info("auth.login", extra={"user_id": principal.id})
        return AuthResultOut(user_id=principal.id, tokens=tokens)

    def whoami(self, claims: TokenClaims) -> UserPublicOut:
        """
        Return the profile of the authenticated user.

        :raises NotFoundError: If the user was deleted after token issuance.
        """
        return self.identity.get_user(claims.user_id)
