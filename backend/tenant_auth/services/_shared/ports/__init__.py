"""
tenant_auth.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing and refresh-session persistence.

These ports decouple the service layer from concrete implementations
of token codecs and refresh storage mechanisms.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, the abstraction for JWT signing and verification.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory`, the user lookup the session manager depends on.

- :mod:`refresh_session_store`:
    Defines :class:`~.RefreshSessionStore` and :class:`~.RefreshSessionView`,
    plus :class:`~.InMemoryRefreshSessionStore` for unit tests.

Concrete adapters (SQL, Redis, PyJWT) live under ``tenant_auth.infra``.
"""

from __future__ import annotations

from .refresh_session_store import (
    DEFAULT_REFRESH_LIFETIME,
    InMemoryRefreshSessionStore,
    RefreshSessionStore,
    RefreshSessionView,
)
from .token_codec import TokenCodec
from .user_directory import Principal, UserDirectory

__all__ = [
    "DEFAULT_REFRESH_LIFETIME",
    "InMemoryRefreshSessionStore",
    "RefreshSessionStore",
    "RefreshSessionView",
    "Principal",
    "TokenCodec",
    "UserDirectory",
]
