"""Pytest fixtures configuring the app, key material and a fresh schema per test.

The database is an in-memory SQLite engine (shared through a static pool),
recreated for every test so committed rows never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from tenant_auth.core.config import TestingConfig
from tenant_auth.core.extensions import db as _db
from tenant_auth.factory import create_app
from tenant_auth.infra.jwt.keys import generate_key_pair
from tenant_auth.models.role import Role
from tenant_auth.services.sessions.dto import TokenClaims

PRIVATE_PEM, PUBLIC_PEM = generate_key_pair()


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Injects a freshly generated RSA key pair inline.
    - Host-only cookies so the test client always sends them back.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_PRIVATE_KEY = PRIVATE_PEM
    JWT_PUBLIC_KEY = PUBLIC_PEM
    JWT_KEY_ID = "test-key"
    JWKS_URI = None
    COOKIE_DOMAIN = ""
    REDIS_URL = None
    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture()
def db(app):
    """Create every table for one test and drop them afterwards.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def session(db):
    """Return the Flask-scoped session shared by repositories and factories."""
    return db.session


@pytest.fixture()
def client(app, db):
    """Flask test client running inside the per-test app context."""
    return app.test_client()


@pytest.fixture()
def codec(app):
    """Token codec built by the application factory."""
    return app.extensions["token_codec"]


@pytest.fixture()
def bearer(codec):
    """Return a helper producing ``Authorization`` headers for a user."""

    def _bearer(user_id: int, role: Role = Role.CUSTOMER) -> dict[str, str]:
        token = codec.issue_access_token(TokenClaims(sub=str(user_id), role=role))
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the Flask-SQLAlchemy session ----------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper when the test uses the database."""
    from tests.factories import SQLAlchemySession

    if "db" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
