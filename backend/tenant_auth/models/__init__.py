from tenant_auth.models.refresh_session import RefreshSession
from tenant_auth.models.role import Role
from tenant_auth.models.tenant import Tenant
from tenant_auth.models.user import User

__all__ = [
    "RefreshSession",
    "Role",
    "Tenant",
    "User",
]
