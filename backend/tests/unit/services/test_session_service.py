"""Tests for SessionService using in-memory doubles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import pytest
from tenant_auth.infra.jwt.keys import KeyMaterial, generate_key_pair
from tenant_auth.infra.jwt.token_codec import JWTTokenCodec
from tenant_auth.models.role import Role
from tenant_auth.services._shared.errors import AuthError, InvalidTokenError
from tenant_auth.services._shared.ports import InMemoryRefreshSessionStore
from tenant_auth.services.sessions.dto import SessionConfig, TokenClaims
from tenant_auth.services.sessions.service import SessionService
from tests.helpers.utils import not_raises

PRIVATE_PEM, PUBLIC_PEM = generate_key_pair()


@dataclass
class FakeUser:
    id: int
    role: Role


class FakeDirectory:
    """In-memory :class:`UserDirectory`."""

    def __init__(self, *users: FakeUser) -> None:
        self.users = {u.id: u for u in users}

    def get_principal(self, user_id: int) -> FakeUser | None:
        return self.users.get(user_id)


class RacingStore(InMemoryRefreshSessionStore):
    """Store whose next delete of ``victim`` loses to a concurrent caller."""

    def __init__(self) -> None:
        super().__init__()
        self.victim: int | None = None

    def delete_by_id(self, session_id: int) -> bool:
        if session_id == self.victim:
            self.victim = None
            super().delete_by_id(session_id)  # the other worker wins
            return False
        return super().delete_by_id(session_id)


@pytest.fixture()
def codec() -> JWTTokenCodec:
    return JWTTokenCodec(
        KeyMaterial(
            private_key=PRIVATE_PEM,
            public_key=PUBLIC_PEM,
            refresh_secret="session-service-test-secret-0123456789",
            key_id="k",
        )
    )


@pytest.fixture()
def user() -> FakeUser:
    return FakeUser(id=1, role=Role.CUSTOMER)


@pytest.fixture()
def directory(user) -> FakeDirectory:
    return FakeDirectory(user)


@pytest.fixture()
def store() -> InMemoryRefreshSessionStore:
    return InMemoryRefreshSessionStore()


@pytest.fixture()
def service(codec, store, directory) -> SessionService:
    return SessionService(codec=codec, store=store, directory=directory)


class TestIssueSession:
    def test_persists_row_and_binds_refresh_token(self, service, store, user):
        pair = service.issue_session(user)

        row = store.get(pair.session_id)
        assert row is not None and row.user_id == user.id

        access = service.verify_access_token(pair.access_token)
        refresh = service.verify_refresh_token(pair.refresh_token)
        assert access.user_id == user.id
        assert access.role is Role.CUSTOMER
        assert refresh.session_id == str(pair.session_id)

    def test_sessions_are_independent(self, service, store, user):
        first = service.issue_session(user)
        second = service.issue_session(user)

        assert first.session_id != second.session_id
        assert [v.id for v in store.list_for_user(user.id)] == [
            first.session_id,
            second.session_id,
        ]

    def test_lifetime_comes_from_config(self, codec, store, directory, user):
        service = SessionService(
            codec=codec,
            store=store,
            directory=directory,
            config=SessionConfig(refresh_lifetime=timedelta(minutes=5)),
        )
        pair = service.issue_session(user)
        row = store.get(pair.session_id)
        assert row.expires_at - row.created_at == timedelta(minutes=5)


class TestRefreshSession:
    def test_rotates_row(self, service, store, user):
        pair = service.issue_session(user)

        fresh = service.refresh_session(service.verify_refresh_token(pair.refresh_token))

        assert fresh.session_id != pair.session_id
        assert store.get(pair.session_id) is None
        assert store.get(fresh.session_id) is not None
        assert service.verify_refresh_token(fresh.refresh_token).session_id == str(
            fresh.session_id
        )

    def test_replayed_token_rejected(self, service, user):
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        service.refresh_session(claims)

        with pytest.raises(InvalidTokenError, match="no longer active"):
            service.refresh_session(claims)

    def test_rejected_after_logout(self, service, user):
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        service.end_session(claims.session_id)

        with pytest.raises(InvalidTokenError):
            service.refresh_session(claims)

    def test_row_of_another_user_rejected(self, service, store, directory, user):
        directory.users[2] = FakeUser(id=2, role=Role.ADMIN)
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        forged = TokenClaims(sub="2", role=Role.ADMIN, session_id=claims.session_id)

        with pytest.raises(InvalidTokenError):
            service.refresh_session(forged)
        assert store.get(pair.session_id) is not None

    def test_expired_row_rejected(self, service, store, user):
        row = store.create(user.id, lifetime=timedelta(seconds=-1))
        claims = TokenClaims(sub=str(user.id), role=user.role, session_id=str(row.id))

        with pytest.raises(InvalidTokenError):
            service.refresh_session(claims)

    def test_carries_current_role(self, service, directory, user):
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        directory.users[user.id] = FakeUser(id=user.id, role=Role.MANAGER)

        fresh = service.refresh_session(claims)

        assert service.verify_access_token(fresh.access_token).role is Role.MANAGER

    def test_deleted_user_rejected(self, service, store, directory, user):
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        # Deleting the user cascades to its session rows
        del directory.users[user.id]
        store.delete_by_id(pair.session_id)

        with pytest.raises(AuthError) as excinfo:
            service.refresh_session(claims)
        assert str(excinfo.value) == "Email or password not match"

    def test_deleted_user_rejected_while_row_remains(self, service, directory, user):
        pair = service.issue_session(user)
        claims = service.verify_refresh_token(pair.refresh_token)
        del directory.users[user.id]

        with pytest.raises(AuthError, match="Email or password not match"):
            service.refresh_session(claims)

    def test_concurrent_loser_gets_no_tokens(self, codec, directory, user):
        store = RacingStore()
        service = SessionService(codec=codec, store=store, directory=directory)
        pair = service.issue_session(user)
        store.victim = pair.session_id

        with pytest.raises(InvalidTokenError):
            service.refresh_session(service.verify_refresh_token(pair.refresh_token))
        assert store.list_for_user(user.id) == []

    @pytest.mark.parametrize("session_id", [None, "abc", "-1", True, "²", "١٢"])
    def test_malformed_session_id_rejected(self, service, session_id):
        claims = TokenClaims(sub="1", role=Role.CUSTOMER, session_id=session_id)
        with pytest.raises(InvalidTokenError):
            service.refresh_session(claims)


class TestEndSession:
    def test_deletes_row(self, service, store, user):
        pair = service.issue_session(user)
        service.end_session(pair.session_id)
        assert store.get(pair.session_id) is None

    def test_is_idempotent(self, service, user):
        pair = service.issue_session(user)
        service.end_session(str(pair.session_id))
        with not_raises(InvalidTokenError):
            service.end_session(str(pair.session_id))

    def test_only_targets_named_session(self, service, store, user):
        first = service.issue_session(user)
        second = service.issue_session(user)
        service.end_session(first.session_id)
        assert store.get(second.session_id) is not None
