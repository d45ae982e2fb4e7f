"""Per-environment settings classes, read from the process environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# Selects the settings class: development | testing | production
ENV_VAR: Final[str] = "APP_ENV"

ONE_HOUR: Final[int] = 60 * 60
ONE_YEAR: Final[int] = 365 * 24 * ONE_HOUR

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

# A missing .env file is fine
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a yes/no flag.

    Parameters
    ----------
    name: str
        Variable name.
    default: bool, optional
        Used when the variable is absent.

    Returns
    -------
    bool
        Whether the value is one of ``1/true/yes/y/on`` (case-insensitive).
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer; blank or absent yields ``default``."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


class BaseConfig:
    """Settings common to every environment.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Mount point of the API blueprints; empty means ``/``.
    JWT_PRIVATE_KEY / JWT_PUBLIC_KEY: str | None
        Inline PEM pair for RS256 access tokens. When absent the
        ``*_PATH`` files written by ``flask keys generate`` are read.
    REFRESH_TOKEN_SECRET: str
        HS256 secret for refresh tokens, which only this service verifies.
    JWT_ISSUER: str
        ``iss`` claim of issued tokens.
    JWT_KEY_ID: str | None
        ``kid`` header of access tokens; a thumbprint of the public key if unset.
    JWKS_URI: str | None
        Remote key set used to verify access tokens by ``kid`` when set.
    ACCESS_TOKEN_TTL_SECONDS / REFRESH_TOKEN_TTL_SECONDS: int
        One hour and one year by default.
    COOKIE_DOMAIN / AUTH_COOKIE_SECURE:
        ``Domain`` and ``Secure`` attributes of the auth cookies.
    REFRESH_SESSION_BACKEND: str
        Where refresh sessions live: ``"sql"`` or ``"redis"``.
    REDIS_URL: str | None
        Needed by the redis backend.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter rule for ``POST /auth/login``.
    USE_PROXYFIX / PROXYFIX_HOPS:
        Trust ``X-Forwarded-*`` from this many proxies.
    """

    API_BASE_PREFIX = os.getenv("API_BASE_PREFIX", "")
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    JWT_PRIVATE_KEY = os.getenv("JWT_PRIVATE_KEY")
    JWT_PUBLIC_KEY = os.getenv("JWT_PUBLIC_KEY")
    JWT_PRIVATE_KEY_PATH = os.getenv("JWT_PRIVATE_KEY_PATH", "certs/private.pem")
    JWT_PUBLIC_KEY_PATH = os.getenv("JWT_PUBLIC_KEY_PATH", "certs/public.pem")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "auth-service")
    JWT_KEY_ID = os.getenv("JWT_KEY_ID")
    JWKS_URI = os.getenv("JWKS_URI")
    ACCESS_TOKEN_TTL_SECONDS = env_int("ACCESS_TOKEN_TTL_SECONDS", ONE_HOUR)
    REFRESH_TOKEN_TTL_SECONDS = env_int("REFRESH_TOKEN_TTL_SECONDS", ONE_YEAR)

    COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN", "localhost")
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)

    REFRESH_SESSION_BACKEND = os.getenv("REFRESH_SESSION_BACKEND", "sql")
    REDIS_URL = os.getenv("REDIS_URL")

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)

    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600


class TestingConfig(BaseConfig):
    """Test runs.

    In-memory SQLite (or ``TEST_DATABASE_URL``), no rate limiting and SQL
    refresh sessions. Fixtures supply the key pair.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    PROPAGATE_EXCEPTIONS = True
    RATELIMIT_ENABLED = False
    REFRESH_SESSION_BACKEND = "sql"
    REFRESH_TOKEN_SECRET = "testing-refresh-secret-with-enough-entropy"


class ProductionConfig(BaseConfig):
    """Deployed runs: never echo SQL; cookies are ``Secure`` unless disabled."""

    SQLALCHEMY_ECHO = False
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Pick the settings class named by ``APP_ENV`` (development when unknown)."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)
