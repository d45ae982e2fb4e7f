# tenant_auth/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from tenant_auth.services.sessions.dto import TokenPairOut


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Result of a successful register or login.

    :param user_id: Authenticated user.
    :type user_id: int
    :param tokens: Freshly issued token pair.
    :type tokens: TokenPairOut
    """

    user_id: int
    tokens: TokenPairOut
