"""Tenant resource schemas."""

from __future__ import annotations

from marshmallow import fields, validate

from tenant_auth.schemas.common import TrimmedSchema


class TenantCreateSchema(TrimmedSchema):
    """Payload for creating a tenant."""

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    address = fields.String(required=True, validate=validate.Length(min=1, max=255))


class TenantSchema(TrimmedSchema):
    """Public representation of a tenant."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    address = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt")
