# tenant_auth/services/sessions/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from tenant_auth.models.role import Role


def is_numeric_id(value: str) -> bool:
    """True for a non-empty run of ASCII digits (``int()`` accepts it)."""
    return value.isascii() and value.isdecimal()


# --------------------------- Claims --------------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified (or about-to-be-signed) token claims.

    :param sub: User id as a string.
    :type sub: str
    :param role: Role of the user at issuance.
    :type role: Role
    :param session_id: Refresh session id (``id`` claim); refresh tokens only.
    :type session_id: str | None
    """

    sub: str
    role: Role
    session_id: str | None = None

    @property
    def user_id(self) -> int:
        """Return ``sub`` as an integer user id."""
        return int(self.sub)


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param user_id: Owner of the session.
    :type user_id: int
    :param session_id: Refresh session row bound to ``refresh_token``.
    :type session_id: int
    """

    access_token: str
    refresh_token: str
    user_id: int
    session_id: int


# ------------------------ Config DTO (optional) --------------------------- #


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """
    Refresh session configuration.

    :param refresh_lifetime: Lifetime of a refresh session row.
    :type refresh_lifetime: timedelta
    """

    refresh_lifetime: timedelta = timedelta(days=365)
