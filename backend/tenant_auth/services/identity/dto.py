"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tenant_auth.models.role import Role

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for self-registration (always a customer).

    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    """

    first_name: str
    last_name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for admin-driven user creation.

    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param email: Login email.
    :type email: str
    :param password: Raw password.
    :type password: str
    :param role: Role to grant (defaults to manager).
    :type role: Role
    :param tenant_id: Optional tenant membership.
    :type tenant_id: int | None
    """

    first_name: str
    last_name: str
    email: str
    password: str
    role: Role = Role.MANAGER
    tenant_id: int | None = None


@dataclass(frozen=True, slots=True)
class UserAuthIn:
    """
    Input DTO for authentication.

    :param email: Login email.
    :type email: str
    :param password: Raw password candidate.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class UserFilterIn:
    """Equality filters for listing users."""

    role: Role | None = None
    tenant_id: int | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe representation of a user (never carries the password hash).

    :param id: User primary key.
    :type id: int
    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param email: Normalized email.
    :type email: str
    :param role: Current role.
    :type role: Role
    :param tenant_id: Tenant membership, if any.
    :type tenant_id: int | None
    :param created_at: Creation timestamp.
    :type created_at: datetime | None
    """

    id: int
    first_name: str
    last_name: str
    email: str
    role: Role
    tenant_id: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class UserAuthOut:
    """
    Principal returned by authentication and directory lookups.

    :param id: User primary key.
    :type id: int
    :param email: Normalized email.
    :type email: str
    :param role: Current role.
    :type role: Role
    """

    id: int
    email: str
    role: Role
