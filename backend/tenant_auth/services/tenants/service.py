"""TenantService: create and read tenants."""

from __future__ import annotations

import logging

from tenant_auth.models.tenant import Tenant
from tenant_auth.services._shared.base import BaseService
from tenant_auth.services._shared.dto import PageMeta, PageOut, PaginationIn
from tenant_auth.services._shared.errors import NotFoundError
from tenant_auth.services.tenants.dto import TenantCreateIn, TenantOut

log = logging.getLogger(__name__)


def _to_out(tenant: Tenant) -> TenantOut:
    return TenantOut(
        id=tenant.id, name=tenant.name, address=tenant.address, created_at=tenant.created_at
    )


class TenantService(BaseService):
    """Application service for the `Tenant` aggregate."""

    def create_tenant(self, dto: TenantCreateIn) -> TenantOut:
        """
        Persist a new tenant.

        :param dto: Name and address.
        :returns: The stored tenant.
        """
        with self.rw_uow() as uow:
            tenant = uow.tenants.add(Tenant(name=dto.name, address=dto.address))
            out = _to_out(tenant)
        log.info("tenant.created", extra={"tenant_id": out.id, "actor_id": self.ctx.actor_id})
        return out

    def get_tenant(self, tenant_id: int) -> TenantOut:
        """
        Retrieve a tenant by id.

        :raises NotFoundError: If the tenant does not exist.
        """
        with self.ro_uow() as uow:
            tenant = uow.tenants.get(tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)
            return _to_out(tenant)

    def list_tenants(self, pagination: PaginationIn) -> PageOut[TenantOut]:
        pg = self.ensure_pagination(
            page=pagination.page, limit=pagination.limit, sort=pagination.sort
        )
        with self.ro_uow() as uow:
            page = uow.tenants.paginate(pg)
            items = [_to_out(t) for t in page.items]
        return PageOut(
            items=items, meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total)
        )
