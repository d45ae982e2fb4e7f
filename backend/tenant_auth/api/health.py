"""Liveness check reporting the state of the backing stores."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from tenant_auth.api.deps import json_response, timing
from tenant_auth.core.extensions import db

bp = Blueprint("health", __name__)


def _check_database() -> str:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("health.db_failed")
        return "fail"
    return "ok"


def _check_redis() -> str | None:
    client = current_app.extensions.get("redis_client")
    if client is None:
        return None
    try:
        client.ping()
    except RedisError:
        current_app.logger.exception("health.redis_failed")
        return "fail"
    return "ok"


@bp.get("/health")
@timing
def healthcheck():
    """``200`` when every configured store answers, ``503`` otherwise."""
    checks = {"db": _check_database()}
    redis_status = _check_redis()
    if redis_status is not None:
        checks["redis"] = redis_status
    healthy = all(value == "ok" for value in checks.values())
    payload = {
        "status": "ok" if healthy else "degraded",
        **checks,
        "version": current_app.config.get("APP_VERSION", "dev"),
        "commit": current_app.config.get("APP_COMMIT", "unknown"),
    }
    return json_response(payload, status=HTTPStatus.OK if healthy else HTTPStatus.SERVICE_UNAVAILABLE)
