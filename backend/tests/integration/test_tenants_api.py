"""HTTP scenarios for the admin-only /tenants endpoints."""

from __future__ import annotations

from tenant_auth.models.role import Role
from tenant_auth.models.tenant import Tenant
from tests.factories.tenant import TenantFactory
from tests.factories.user import UserFactory


def test_admin_creates_tenant(client, bearer, session):
    admin = UserFactory(role=Role.ADMIN)

    resp = client.post(
        "/tenants",
        json={"name": "Casa Pepe", "address": "Calle Mayor 1"},
        headers=bearer(admin.id, Role.ADMIN),
    )

    assert resp.status_code == 201
    tenant = session.get(Tenant, resp.get_json()["id"])
    assert tenant.name == "Casa Pepe"


def test_manager_cannot_create_tenant(client, bearer, session):
    manager = UserFactory(role=Role.MANAGER)

    resp = client.post(
        "/tenants",
        json={"name": "Casa Pepe", "address": "Calle Mayor 1"},
        headers=bearer(manager.id, Role.MANAGER),
    )

    assert resp.status_code == 403
    assert session.query(Tenant).count() == 0


def test_missing_fields(client, bearer):
    admin = UserFactory(role=Role.ADMIN)
    resp = client.post("/tenants", json={"name": ""}, headers=bearer(admin.id, Role.ADMIN))
    assert resp.status_code == 422


def test_list_and_get(client, bearer):
    admin = UserFactory(role=Role.ADMIN)
    tenants = TenantFactory.create_batch(2)
    headers = bearer(admin.id, Role.ADMIN)

    listing = client.get("/tenants", headers=headers).get_json()
    single = client.get(f"/tenants/{tenants[0].id}", headers=headers)

    assert listing["meta"]["total"] == 2
    assert single.status_code == 200
    assert single.get_json()["name"] == tenants[0].name
    assert client.get("/tenants/999", headers=headers).status_code == 404
