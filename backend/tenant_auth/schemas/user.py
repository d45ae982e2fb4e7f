"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, fields, validate

from tenant_auth.models.role import Role
from tenant_auth.schemas.auth import RegisterSchema
from tenant_auth.schemas.common import TrimmedSchema


class UserCreateSchema(RegisterSchema):
    """Payload for creating a user from the admin surface."""

    role = fields.Enum(Role, by_value=True, load_default=Role.MANAGER)
    tenant_id = fields.Integer(
        data_key="tenantId", load_default=None, allow_none=True, validate=validate.Range(min=1)
    )


class UserFilterSchema(TrimmedSchema):
    """Supported query parameters for listing users."""

    class Meta:
        unknown = EXCLUDE

    role = fields.Enum(Role, by_value=True, load_default=None)
    tenant_id = fields.Integer(data_key="tenantId", load_default=None)


class UserSchema(TrimmedSchema):
    """Public representation of a user entity (no password material)."""

    id = fields.Integer(required=True)
    first_name = fields.String(required=True, data_key="firstName")
    last_name = fields.String(required=True, data_key="lastName")
    email = fields.Email(required=True)
    role = fields.Enum(Role, by_value=True, required=True)
    tenant_id = fields.Integer(allow_none=True, data_key="tenantId")
    created_at = fields.DateTime(data_key="createdAt")
