from __future__ import annotations

from typing import Protocol

from tenant_auth.models.role import Role


class Principal(Protocol):
    """Anything exposing the id and current role of a user."""

    @property
    def id(self) -> int: ...

    @property
    def role(self) -> Role: ...


class UserDirectory(Protocol):
    """Lookup used by the session manager to re-read a user's current role."""

    def get_principal(self, user_id: int) -> Principal | None: ...
