"""Tests for the role gate."""

from __future__ import annotations

import pytest
from tenant_auth.models.role import Role
from tenant_auth.services._shared.errors import ForbiddenError
from tenant_auth.services._shared.policies.roles import can_access, has_role
from tenant_auth.services.sessions.dto import TokenClaims
from tests.helpers.utils import not_raises


def _claims(role: Role) -> TokenClaims:
    return TokenClaims(sub="1", role=role)


@pytest.mark.parametrize("role", list(Role))
def test_admin_only_gate(role):
    if role is Role.ADMIN:
        with not_raises(ForbiddenError):
            can_access(_claims(role), {Role.ADMIN})
    else:
        with pytest.raises(ForbiddenError, match="Access denied"):
            can_access(_claims(role), {Role.ADMIN})


def test_empty_allowed_set_denies_everyone():
    for role in Role:
        assert has_role(_claims(role), set()) is False


def test_multiple_roles_allowed():
    allowed = {Role.ADMIN, Role.MANAGER}
    assert has_role(_claims(Role.MANAGER), allowed)
    assert not has_role(_claims(Role.CUSTOMER), allowed)
