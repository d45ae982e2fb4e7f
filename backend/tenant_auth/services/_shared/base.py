"""Shared plumbing for application services: context and units of work."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tenant_auth.repositories.base import Pagination
from tenant_auth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(slots=True)
class ServiceContext:
    """
    Request-scoped facts a service may log or scope by.

    :param actor_id: Id of the authenticated caller, if any.
    :param tenant_id: Tenant the call is scoped to, if any.
    :param request_id: Correlation id of the HTTP request.
    """

    actor_id: int | None = None
    tenant_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Parent of every service that talks to the database.

    Services open exactly one unit of work per operation through
    :meth:`rw_uow` or :meth:`ro_uow` and never touch ``db.session`` directly.
    They raise exceptions from :mod:`tenant_auth.services._shared.errors`;
    mapping those onto HTTP is done by :mod:`tenant_auth.core.errors`.
    """

    READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of work that commits on success."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        """Unit of work that refuses writes and never commits."""
        return SQLAlchemyReadOnlyUnitOfWork(isolation_level=isolation or self.READ_ISOLATION)

    @staticmethod
    def ensure_pagination(*, page: int, limit: int, sort: Iterable[str] | None = None) -> Pagination:
        """Clamp ``page`` and ``limit`` to at least 1 and freeze the sort tokens."""
        return Pagination(page=max(1, int(page)), limit=max(1, int(limit)), sort=list(sort or []))
