"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from datetime import timedelta

from flask import Flask

from tenant_auth.core.config import BaseConfig, get_config
from tenant_auth.core.logger import configure_logging, init_app as init_logging


def _init_tokens(app: Flask) -> None:
    """Load key material and register the token codec and refresh store."""

    from tenant_auth.core.extensions import get_redis
    from tenant_auth.infra.jwt.keys import load_key_material
    from tenant_auth.infra.jwt.token_codec import JWTTokenCodec

    keys = load_key_material(app.config)
    app.extensions["key_material"] = keys
    app.extensions["token_codec"] = JWTTokenCodec(
        keys,
        access_ttl=timedelta(seconds=int(app.config["ACCESS_TOKEN_TTL_SECONDS"])),
        refresh_ttl=timedelta(seconds=int(app.config["REFRESH_TOKEN_TTL_SECONDS"])),
    )

    backend = str(app.config.get("REFRESH_SESSION_BACKEND", "sql")).strip().lower()
    if backend == "redis":
        from tenant_auth.infra.redis.redis_refresh_session_store import (
            RedisRefreshSessionStore,
        )

        if not app.config.get("REDIS_URL"):
            raise RuntimeError("REFRESH_SESSION_BACKEND=redis requires REDIS_URL.")
        app.extensions["refresh_session_store"] = RedisRefreshSessionStore(get_redis(app))
    elif backend == "sql":
        from tenant_auth.infra.sql.sqlalchemy_refresh_session_store import (
            SQLAlchemyRefreshSessionStore,
        )

        app.extensions["refresh_session_store"] = SQLAlchemyRefreshSessionStore()
    else:
        raise RuntimeError(f"Unknown REFRESH_SESSION_BACKEND {backend!r}.")


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Startup fails with :class:`~tenant_auth.infra.jwt.keys.KeyMaterialError`
    when the signing keys or the refresh secret cannot be loaded.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from tenant_auth.core import proxy

    proxy.init_app(app)

    from tenant_auth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    _init_tokens(app)

    from tenant_auth.core import cors

    cors.init_app(app)

    from tenant_auth.api import init_app as init_api

    init_api(app)

    from tenant_auth.core import errors

    errors.init_app(app)

    from tenant_auth import cli as app_cli

    app_cli.init_app(app)

    return app
