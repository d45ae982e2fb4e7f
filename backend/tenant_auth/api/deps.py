"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request

from tenant_auth.core.logger import ensure_request_id
from tenant_auth.schemas.common import PaginationQuerySchema
from tenant_auth.services._shared.base import ServiceContext
from tenant_auth.services._shared.dto import PaginationIn
from tenant_auth.services._shared.errors import InvalidTokenError
from tenant_auth.services._shared.ports import RefreshSessionStore, TokenCodec
from tenant_auth.services.auth.service import AuthService
from tenant_auth.services.sessions.dto import SessionConfig, TokenClaims, TokenPairOut
from tenant_auth.services.sessions.service import SessionService

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


# --------------------------------------------------------------------------- #
# Request parsing
# --------------------------------------------------------------------------- #


def parse_pagination(default_limit: int = 20, max_limit: int = 200) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"], sort=data["sort"])


def json_body() -> dict[str, Any]:
    """Return the JSON body as a dict (empty when absent or not an object)."""

    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


# --------------------------------------------------------------------------- #
# Tokens & cookies
# --------------------------------------------------------------------------- #


def read_access_token() -> str | None:
    """Return the access token from ``Authorization: Bearer`` or the cookie."""

    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(ACCESS_COOKIE) or None


def read_refresh_token() -> str | None:
    """Return the refresh token carried by the ``refreshToken`` cookie."""

    return request.cookies.get(REFRESH_COOKIE) or None


def authenticate_request() -> TokenClaims:
    """Verify the request's access token and return its claims.

    :raises InvalidTokenError: If the token is missing or invalid.
    """

    token = read_access_token()
    if not token:
        raise InvalidTokenError("Missing access token")
    return get_token_codec().verify_access_token(token)


def authenticate_refresh() -> TokenClaims:
    """Verify the refresh cookie and return its claims.

    :raises InvalidTokenError: If the cookie is missing or invalid.
    """

    token = read_refresh_token()
    if not token:
        raise InvalidTokenError("Missing refresh token")
    return get_token_codec().verify_refresh_token(token)


def _cookie_options() -> dict[str, Any]:
    return {
        "domain": current_app.config.get("COOKIE_DOMAIN") or None,
        "samesite": "Strict",
        "httponly": True,
        "secure": bool(current_app.config.get("AUTH_COOKIE_SECURE", False)),
        "path": "/",
    }


def set_session_cookies(response: Response, tokens: TokenPairOut) -> Response:
    """Attach the access and refresh cookies to ``response``."""

    opts = _cookie_options()
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=int(current_app.config.get("ACCESS_TOKEN_TTL_SECONDS", 3600)),
        **opts,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=int(current_app.config.get("REFRESH_TOKEN_TTL_SECONDS", 31536000)),
        **opts,
    )
    return response


def clear_session_cookies(response: Response) -> Response:
    """Expire both auth cookies on the client."""

    opts = _cookie_options()
    response.delete_cookie(
        ACCESS_COOKIE,
        path=opts["path"],
        domain=opts["domain"],
        secure=opts["secure"],
        httponly=True,
        samesite="Strict",
    )
    response.delete_cookie(
        REFRESH_COOKIE,
        path=opts["path"],
        domain=opts["domain"],
        secure=opts["secure"],
        httponly=True,
        samesite="Strict",
    )
    return response


# --------------------------------------------------------------------------- #
# Service wiring
# --------------------------------------------------------------------------- #


def get_token_codec() -> TokenCodec:
    """Return the token codec built by the application factory."""

    return cast(TokenCodec, current_app.extensions["token_codec"])


def get_refresh_session_store() -> RefreshSessionStore:
    """Return the refresh session store selected by ``REFRESH_SESSION_BACKEND``."""

    return cast(RefreshSessionStore, current_app.extensions["refresh_session_store"])


def service_context(claims: TokenClaims | None = None) -> ServiceContext:
    """Build a :class:`ServiceContext` for the current request."""

    return ServiceContext(
        actor_id=claims.user_id if claims is not None else None,
        request_id=ensure_request_id(),
    )


def build_session_service(ctx: ServiceContext | None = None) -> SessionService:
    """Wire a :class:`SessionService` from the app-level collaborators."""

    lifetime = current_app.config.get("REFRESH_TOKEN_TTL_SECONDS")
    config = SessionConfig()
    if lifetime:
        config = SessionConfig(refresh_lifetime=timedelta(seconds=int(lifetime)))
    return SessionService(
        codec=get_token_codec(),
        store=get_refresh_session_store(),
        config=config,
        ctx=ctx or service_context(),
    )


def build_auth_service(ctx: ServiceContext | None = None) -> AuthService:
    """Wire an :class:`AuthService` on top of :func:`build_session_service`."""

    ctx = ctx or service_context()
    return AuthService(sessions=build_session_service(ctx), ctx=ctx)


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
