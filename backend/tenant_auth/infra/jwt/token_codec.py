# tenant_auth/infra/jwt/token_codec.py
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import PyJWKClient

from tenant_auth.infra.jwt.keys import (
    ACCESS_TOKEN_ALGORITHM,
    REFRESH_TOKEN_ALGORITHM,
    KeyMaterial,
)
from tenant_auth.models.role import Role
from tenant_auth.services._shared.errors import InvalidTokenError
from tenant_auth.services._shared.ports.token_codec import TokenCodec
from tenant_auth.services.sessions.dto import TokenClaims, is_numeric_id

ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=365)


class JWTTokenCodec(TokenCodec):
    """
    PyJWT adapter for :class:`TokenCodec`.

    * Access tokens: RS256 signed with the private key, ``kid`` header.
    * Refresh tokens: HS256 signed with ``refresh_secret``; carry the refresh
      session id in the ``id`` claim.

    Verification pins the algorithm per token kind, so a refresh token is
    never accepted as an access token and vice versa.
    """

    def __init__(
        self,
        keys: KeyMaterial,
        *,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        leeway: int = 0,
        jwks_client: PyJWKClient | None = None,
    ) -> None:
        self.keys = keys
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.leeway = leeway
        if jwks_client is None and keys.jwks_uri:
            jwks_client = PyJWKClient(keys.jwks_uri, cache_keys=True, lifespan=3600)
        self._jwks_client = jwks_client

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def _base_payload(self, claims: TokenClaims, ttl: timedelta) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(claims.sub),
            "role": Role.from_wire(claims.role).value,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "iss": self.keys.issuer,
        }

    def issue_access_token(self, claims: TokenClaims) -> str:
        payload = self._base_payload(claims, self.access_ttl)
        return jwt.encode(
            payload,
            self.keys.private_key,
            algorithm=ACCESS_TOKEN_ALGORITHM,
            headers={"kid": self.keys.key_id},
        )

    def issue_refresh_token(self, claims: TokenClaims) -> str:
        if not claims.session_id:
            raise ValueError("Refresh tokens require a session id.")
        payload = self._base_payload(claims, self.refresh_ttl)
        payload["id"] = str(claims.session_id)
        return jwt.encode(payload, self.keys.refresh_secret, algorithm=REFRESH_TOKEN_ALGORITHM)

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access_token(self, token: str) -> TokenClaims:
        try:
            if self._jwks_client is not None:
                key: Any = self._jwks_client.get_signing_key_from_jwt(token).key
            else:
                key = self.keys.public_key
            payload = self._decode(token, key, ACCESS_TOKEN_ALGORITHM, ["sub", "role"])
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(f"Invalid access token: {exc}") from exc
        return self._to_claims(payload, session_id=None)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        try:
            payload = self._decode(
                token, self.keys.refresh_secret, REFRESH_TOKEN_ALGORITHM, ["sub", "role", "id"]
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(f"Invalid refresh token: {exc}") from exc
        session_id = str(payload["id"])
        if not is_numeric_id(session_id):
            raise InvalidTokenError("Invalid refresh token: malformed session id")
        return self._to_claims(payload, session_id=session_id)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _decode(
        self, token: str, key: Any, algorithm: str, required: list[str]
    ) -> dict[str, Any]:
        if not isinstance(token, str) or not token:
            raise jwt.DecodeError("Token must be a non-empty string")
        return jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            issuer=self.keys.issuer,
            leeway=self.leeway,
            options={"require": ["exp", "iat", "iss", *required]},
        )

    @staticmethod
    def _to_claims(payload: dict[str, Any], *, session_id: str | None) -> TokenClaims:
        sub = payload["sub"]
        if not isinstance(sub, str) or not is_numeric_id(sub):
            raise InvalidTokenError("Invalid token: malformed subject")
        try:
            role = Role.from_wire(payload["role"])
        except ValueError as exc:
            raise InvalidTokenError(f"Invalid token: {exc}") from exc
        return TokenClaims(sub=sub, role=role, session_id=session_id)
