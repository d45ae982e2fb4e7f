"""Tests for the SQLAlchemy refresh session store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from tenant_auth.infra.sql.sqlalchemy_refresh_session_store import SQLAlchemyRefreshSessionStore
from tenant_auth.models.refresh_session import RefreshSession
from tests.factories.user import UserFactory


@pytest.fixture()
def store(db) -> SQLAlchemyRefreshSessionStore:
    return SQLAlchemyRefreshSessionStore()


class TestSQLAlchemyRefreshSessionStore:
    def test_create_commits_row(self, store, session):
        user = UserFactory()
        view = store.create(user.id, lifetime=timedelta(days=1))

        row = session.get(RefreshSession, view.id)
        assert row is not None
        assert row.user_id == user.id
        assert view.expires_at - view.created_at == timedelta(days=1)

    def test_get_returns_aware_datetimes(self, store):
        user = UserFactory()
        created = store.create(user.id)

        got = store.get(created.id)

        assert got is not None
        assert got.user_id == user.id
        assert got.expires_at.tzinfo is not None
        assert got.expires_at > datetime.now(UTC)
        assert not got.is_expired()

    def test_get_missing_returns_none(self, store):
        assert store.get(12345) is None

    def test_delete_reports_only_first_caller(self, store):
        user = UserFactory()
        view = store.create(user.id)

        assert store.delete_by_id(view.id) is True
        assert store.delete_by_id(view.id) is False
        assert store.get(view.id) is None

    def test_list_for_user(self, store):
        alice, bob = UserFactory(), UserFactory()
        a1 = store.create(alice.id)
        a2 = store.create(alice.id)
        store.create(bob.id)

        assert [v.id for v in store.list_for_user(alice.id)] == [a1.id, a2.id]

    def test_expired_row_is_reported_expired(self, store):
        user = UserFactory()
        view = store.create(user.id, lifetime=timedelta(seconds=-1))
        assert store.get(view.id).is_expired()
