"""Tenant endpoints (admin only)."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint

from tenant_auth.api.deps import (
    authenticate_request,
    json_body,
    json_response,
    parse_pagination,
    service_context,
    timing,
)
from tenant_auth.models.role import Role
from tenant_auth.schemas import IdSchema, MetaSchema, TenantCreateSchema, TenantSchema
from tenant_auth.services._shared.policies.roles import can_access
from tenant_auth.services.tenants.dto import TenantCreateIn
from tenant_auth.services.tenants.service import TenantService

bp = Blueprint("tenants", __name__)

ALLOWED_ROLES = frozenset({Role.ADMIN})

tenant_schema = TenantSchema()
tenant_list_schema = TenantSchema(many=True)
tenant_create_schema = TenantCreateSchema()
meta_schema = MetaSchema()
id_schema = IdSchema()


@bp.post("")
@timing
def create_tenant():
    """Create a tenant and return its id."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    data = tenant_create_schema.load(json_body())
    tenant = TenantService(ctx=service_context(claims)).create_tenant(TenantCreateIn(**data))
    return json_response(id_schema.dump(tenant), status=HTTPStatus.CREATED)


@bp.get("")
@timing
def list_tenants():
    """Return paginated tenants."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    page = TenantService(ctx=service_context(claims)).list_tenants(parse_pagination())
    return json_response(
        {"data": tenant_list_schema.dump(page.items), "meta": meta_schema.dump(page.meta)}
    )


@bp.get("/<int:tenant_id>")
@timing
def get_tenant(tenant_id: int):
    """Return a single tenant."""

    claims = authenticate_request()
    can_access(claims, ALLOWED_ROLES)
    tenant = TenantService(ctx=service_context(claims)).get_tenant(tenant_id)
    return json_response(tenant_schema.dump(tenant))
