"""Tenant repository."""

from __future__ import annotations

from tenant_auth.models.tenant import Tenant
from tenant_auth.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Persistence-only repository for :class:`Tenant`."""

    model = Tenant

    def _sortable_fields(self):
        return {
            "id": Tenant.id,
            "name": Tenant.name,
            "created_at": Tenant.created_at,
        }

    def _filterable_fields(self):
        return {"name": Tenant.name}
