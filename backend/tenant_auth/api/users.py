"""User management endpoints (admin only)."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request

from tenant_auth.api.deps import (
    authenticate_request,
    json_body,
    json_response,
    parse_pagination,
    service_context,
    timing,
)
from tenant_auth.models.role import Role
from tenant_auth.schemas import IdSchema, MetaSchema, UserCreateSchema, UserFilterSchema, UserSchema
from tenant_auth.services._shared.policies.roles import can_access
from tenant_auth.services.identity.dto import UserCreateIn, UserFilterIn
from tenant_auth.services.identity.service import IdentityService

bp = Blueprint("users", __name__)

ALLOWED_ROLES = frozenset({Role.ADMIN})

user_schema = UserSchema()
user_list_schema = UserSchema(many=True)
user_create_schema = UserCreateSchema()
user_filter_schema = UserFilterSchema()
meta_schema = MetaSchema()
id_schema = IdSchema()


@bp.post("")
@timing
def create_user():
    """Create a user with an explicit role and optional tenant."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    data = user_create_schema.load(json_body())
    user = IdentityService(ctx=service_context(claims)).create_user(UserCreateIn(**data))
    return json_response(id_schema.dump(user), status=HTTPStatus.CREATED)


@bp.get("")
@timing
def list_users():
    """Return paginated users, optionally filtered by role or tenant."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    page = IdentityService(ctx=service_context(claims)).list_users(
        pagination, UserFilterIn(**filters)
    )
    return json_response(
        {"data": user_list_schema.dump(page.items), "meta": meta_schema.dump(page.meta)}
    )


@bp.get("/<int:user_id>")
@timing
def get_user(user_id: int):
    """Return a single user."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    user = IdentityService(ctx=service_context(claims)).get_user(user_id)
    return json_response(user_schema.dump(user))
