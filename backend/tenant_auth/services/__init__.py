"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`tenant_auth.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``tenant_auth.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``tenant_auth.services._shared.dto``)
    * :class:`PaginationIn`
    * :class:`PageMeta`
    * :class:`PageOut`

- Identity service (from ``tenant_auth.services.identity``)
    * :class:`IdentityService`
    * DTOs: :class:`UserRegisterIn`, :class:`UserCreateIn`, :class:`UserAuthIn`,
      :class:`UserFilterIn`, :class:`UserPublicOut`, :class:`UserAuthOut`

- Tenant service (from ``tenant_auth.services.tenants``)
    * :class:`TenantService`
    * DTOs: :class:`TenantCreateIn`, :class:`TenantOut`

- Session manager (from ``tenant_auth.services.sessions``)
    * :class:`SessionService`
    * DTOs: :class:`TokenClaims`, :class:`TokenPairOut`, :class:`SessionConfig`

- Auth orchestration (from ``tenant_auth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`AuthResultOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Shared DTOs (compose these in endpoint-specific DTOs)
from ._shared.dto import PageMeta, PageOut, PaginationIn

# Auth orchestration
from .auth.dto import AuthResultOut
from .auth.service import AuthService

# Identity service + DTOs
from .identity.dto import (
    UserAuthIn,
    UserAuthOut,
    UserCreateIn,
    UserFilterIn,
    UserPublicOut,
    UserRegisterIn,
)
from .identity.service import IdentityService

# Session manager + DTOs
from .sessions.dto import SessionConfig, TokenClaims, TokenPairOut
from .sessions.service import SessionService

# Tenant service + DTOs
from .tenants.dto import TenantCreateIn, TenantOut
from .tenants.service import TenantService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Shared DTOs
    "PaginationIn",
    "PageMeta",
    "PageOut",
    # Identity
    "IdentityService",
    "UserRegisterIn",
    "UserCreateIn",
    "UserAuthIn",
    "UserFilterIn",
    "UserPublicOut",
    "UserAuthOut",
    # Tenants
    "TenantService",
    "TenantCreateIn",
    "TenantOut",
    # Sessions
    "SessionService",
    "SessionConfig",
    "TokenClaims",
    "TokenPairOut",
    # Auth
    "AuthService",
    "AuthResultOut",
]
