from tenant_auth.repositories.refresh_session import RefreshSessionRepository
from tenant_auth.repositories.tenant import TenantRepository
from tenant_auth.repositories.user import UserRepository

__all__ = ["RefreshSessionRepository", "TenantRepository", "UserRepository"]
