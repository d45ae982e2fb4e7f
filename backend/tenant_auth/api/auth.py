"""Authentication endpoints: register, login, self, refresh, logout."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app

from tenant_auth.api.deps import (
    authenticate_refresh,
    authenticate_request,
    build_auth_service,
    build_session_service,
    clear_session_cookies,
    json_body,
    json_response,
    service_context,
    set_session_cookies,
    timing,
)
from tenant_auth.core.extensions import limiter
from tenant_auth.schemas import IdSchema, LoginSchema, RegisterSchema, UserSchema
from tenant_auth.services._shared.errors import InvalidTokenError
from tenant_auth.services.identity.dto import UserAuthIn, UserRegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
user_schema = UserSchema()
id_schema = IdSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
def register():
    """Register a customer, open a session and set the auth cookies."""

    data = register_schema.load(json_body())
    result = build_auth_service().register(UserRegisterIn(**data))
    response = json_response(id_schema.dump({"id": result.user_id}), status=HTTPStatus.CREATED)
    return set_session_cookies(response, result.tokens)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials, open a session and set the auth cookies."""

    data = login_schema.load(json_body())
    result = build_auth_service().login(UserAuthIn(**data))
    response = json_response(id_schema.dump({"id": result.user_id}))
    return set_session_cookies(response, result.tokens)


@bp.get("/self")
@timing
def whoami():
    """Return the authenticated user (never the password hash)."""

    claims = authenticate_request()
    user = build_auth_service(service_context(claims)).whoami(claims)
    return json_response(user_schema.dump(user))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh session and re-issue both cookies."""

    claims = authenticate_refresh()
    tokens = build_session_service(service_context(claims)).refresh_session(claims)
    response = json_response(id_schema.dump({"id": tokens.user_id}), status=HTTPStatus.CREATED)
    return set_session_cookies(response, tokens)


@bp.post("/logout")
@timing
def logout():
    """End the refresh session named by the refresh cookie and clear cookies."""

    access = authenticate_request()
    refresh_claims = authenticate_refresh()
    if refresh_claims.sub != access.sub:
        raise InvalidTokenError("Refresh token does not belong to the caller")
    build_session_service(service_context(access)).end_session(refresh_claims.session_id)
    return clear_session_cookies(json_response({}))
