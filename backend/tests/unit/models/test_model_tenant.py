"""Tests for the Tenant and RefreshSession models."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from tenant_auth.models.refresh_session import RefreshSession
from tenant_auth.models.tenant import Tenant
from tests.factories.user import UserFactory


class TestTenant:
    def test_fields_are_trimmed(self):
        t = Tenant(name="  Casa Pepe ", address=" Calle Mayor 1 ")
        assert t.name == "Casa Pepe"
        assert t.address == "Calle Mayor 1"

    @pytest.mark.parametrize("field", ["name", "address"])
    def test_blank_fields_rejected(self, field):
        data = {"name": "Casa Pepe", "address": "Calle Mayor 1", field: "  "}
        with pytest.raises(ValueError, match=field):
            Tenant(**data)


class TestRefreshSession:
    def test_row_links_to_user(self, session):
        user = UserFactory()
        row = RefreshSession(user=user, expires_at=datetime.now(UTC) + timedelta(days=1))
        session.add(row)
        session.flush()

        assert row.id is not None
        assert row.user_id == user.id
        assert user.refresh_sessions == [row]
