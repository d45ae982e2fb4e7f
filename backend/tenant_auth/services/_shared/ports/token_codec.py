from __future__ import annotations

from typing import Protocol

from tenant_auth.services.sessions.dto import TokenClaims


class TokenCodec(Protocol):
    """
    Port for signing and verifying session tokens.

    Access tokens are asymmetric (anyone holding the public key can verify
    them); refresh tokens are symmetric and only ever verified here. Every
    verification failure surfaces as
    :class:`~tenant_auth.services._shared.errors.InvalidTokenError`.
    """

    def issue_access_token(self, claims: TokenClaims) -> str: ...

    def issue_refresh_token(self, claims: TokenClaims) -> str: ...

    def verify_access_token(self, token: str) -> TokenClaims: ...

    def verify_refresh_token(self, token: str) -> TokenClaims: ...
