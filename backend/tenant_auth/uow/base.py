"""
Abstract Unit of Work contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tenant_auth.repositories import (
        RefreshSessionRepository,
        TenantRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    Transactional boundary for one service call.

    Every repository exposed by a unit of work shares its session, so a
    service sees its own writes and either keeps all of them or none.
    """

    users: UserRepository
    tenants: TenantRepository
    refresh_sessions: RefreshSessionRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
