"""HTTP scenarios for the admin-only /users endpoints."""

from __future__ import annotations

import pytest
from tenant_auth.models.role import Role
from tenant_auth.models.user import User
from tests.factories.tenant import TenantFactory
from tests.factories.user import UserFactory

NEW_MANAGER = {
    "firstName": "Mia",
    "lastName": "Manager",
    "email": "mia@example.com",
    "password": "password123",
}


@pytest.fixture()
def admin():
    return UserFactory(role=Role.ADMIN)


class TestCreateUser:
    def test_admin_creates_manager(self, client, bearer, admin, session):
        tenant = TenantFactory()

        resp = client.post(
            "/users",
            json={**NEW_MANAGER, "tenantId": tenant.id},
            headers=bearer(admin.id, Role.ADMIN),
        )

        assert resp.status_code == 201
        created = session.get(User, resp.get_json()["id"])
        assert created.role is Role.MANAGER
        assert created.tenant_id == tenant.id

    def test_explicit_role(self, client, bearer, admin, session):
        resp = client.post(
            "/users", json={**NEW_MANAGER, "role": "admin"}, headers=bearer(admin.id, Role.ADMIN)
        )
        assert resp.status_code == 201
        assert session.get(User, resp.get_json()["id"]).role is Role.ADMIN

    @pytest.mark.parametrize("role", [Role.MANAGER, Role.CUSTOMER])
    def test_non_admin_forbidden_and_nothing_written(self, client, bearer, session, role):
        caller = UserFactory(role=role)

        resp = client.post("/users", json=NEW_MANAGER, headers=bearer(caller.id, role))

        assert resp.status_code == 403
        assert resp.get_json()["code"] == "forbidden"
        assert session.query(User).filter_by(email="mia@example.com").count() == 0

    def test_anonymous_unauthorized(self, client):
        assert client.post("/users", json=NEW_MANAGER).status_code == 401

    def test_unknown_role_rejected(self, client, bearer, admin):
        resp = client.post(
            "/users", json={**NEW_MANAGER, "role": "root"}, headers=bearer(admin.id, Role.ADMIN)
        )
        assert resp.status_code == 422

    def test_password_over_bcrypt_byte_limit_rejected(self, client, bearer, admin, session):
        resp = client.post(
            "/users",
            json={**NEW_MANAGER, "password": "é" * 40},
            headers=bearer(admin.id, Role.ADMIN),
        )

        assert resp.status_code == 422
        assert "password" in resp.get_json()["details"]["errors"]
        assert session.query(User).filter_by(email="mia@example.com").count() == 0

    def test_unknown_tenant(self, client, bearer, admin):
        resp = client.post(
            "/users", json={**NEW_MANAGER, "tenantId": 999}, headers=bearer(admin.id, Role.ADMIN)
        )
        assert resp.status_code == 404

    def test_duplicate_email(self, client, bearer, admin):
        UserFactory(email="mia@example.com")
        resp = client.post("/users", json=NEW_MANAGER, headers=bearer(admin.id, Role.ADMIN))
        assert resp.status_code == 409


class TestListUsers:
    def test_lists_with_meta(self, client, bearer, admin):
        UserFactory.create_batch(3, role=Role.CUSTOMER)

        resp = client.get("/users?limit=2&sort=id", headers=bearer(admin.id, Role.ADMIN))

        assert resp.status_code == 200
        body = resp.get_json()
        assert len(body["data"]) == 2
        assert body["meta"] == {
            "total": 4,
            "page": 1,
            "limit": 2,
            "hasPrev": False,
            "hasNext": True,
        }
        assert all("password" not in item for item in body["data"])

    def test_filters_by_role_and_tenant(self, client, bearer, admin):
        tenant = TenantFactory()
        manager = UserFactory(role=Role.MANAGER, tenant=tenant)
        UserFactory(role=Role.MANAGER)

        resp = client.get(
            f"/users?role=manager&tenantId={tenant.id}", headers=bearer(admin.id, Role.ADMIN)
        )

        assert [u["id"] for u in resp.get_json()["data"]] == [manager.id]

    def test_manager_forbidden(self, client, bearer):
        manager = UserFactory(role=Role.MANAGER)
        assert client.get("/users", headers=bearer(manager.id, Role.MANAGER)).status_code == 403


class TestGetUser:
    def test_get_user(self, client, bearer, admin):
        user = UserFactory()
        resp = client.get(f"/users/{user.id}", headers=bearer(admin.id, Role.ADMIN))
        assert resp.status_code == 200
        assert resp.get_json()["email"] == user.email

    def test_missing_user(self, client, bearer, admin):
        resp = client.get("/users/9999", headers=bearer(admin.id, Role.ADMIN))
        assert resp.status_code == 404
