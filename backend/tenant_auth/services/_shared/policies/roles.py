"""Role gate: compare the role claim of a verified token to an allowed set."""

from __future__ import annotations

from collections.abc import Collection

from tenant_auth.models.role import Role
from tenant_auth.services._shared.errors import ForbiddenError
from tenant_auth.services.sessions.dto import TokenClaims


def has_role(claims: TokenClaims, allowed_roles: Collection[Role]) -> bool:
    """Return ``True`` when ``claims.role`` is one of ``allowed_roles``."""
    return claims.role in allowed_roles


def can_access(claims: TokenClaims, allowed_roles: Collection[Role]) -> None:
    """
    Authorize a verified principal.

    :param claims: Claims returned by access-token verification.
    :param allowed_roles: Roles permitted to proceed. An empty collection
        denies everyone.
    :raises ForbiddenError: If the role is not allowed.
    """
    if not has_role(claims, allowed_roles):
        raise ForbiddenError("Access denied")
