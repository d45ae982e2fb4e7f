"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RegisterSchema
from .common import IdSchema, MetaSchema, PaginationQuerySchema, SortQuerySchema
from .tenant import TenantCreateSchema, TenantSchema
from .user import UserCreateSchema, UserFilterSchema, UserSchema

__all__ = [
    "LoginSchema",
    "RegisterSchema",
    "IdSchema",
    "PaginationQuerySchema",
    "SortQuerySchema",
    "MetaSchema",
    "TenantCreateSchema",
    "TenantSchema",
    "UserSchema",
    "UserCreateSchema",
    "UserFilterSchema",
]
