"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import ValidationError, fields, validate

from tenant_auth.models.user import MAX_PASSWORD_BYTES
from tenant_auth.schemas.common import TrimmedSchema


def validate_password_bytes(value: str) -> None:
    """Reject passwords bcrypt would truncate (it reads 72 bytes of UTF-8)."""
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded.")


class RegisterSchema(TrimmedSchema):
    """Input payload for customer self-registration."""

    first_name = fields.String(
        required=True, data_key="firstName", validate=validate.Length(min=1, max=100)
    )
    last_name = fields.String(
        required=True, data_key="lastName", validate=validate.Length(min=1, max=100)
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True,
        load_only=True,
        validate=[validate.Length(min=8), validate_password_bytes],
    )


class LoginSchema(TrimmedSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))
