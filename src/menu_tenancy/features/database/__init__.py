"""Database feature for menu-tenancy.

- entities/: connection descriptor, tenant database config and protocols
- repositories/: tenant registry, pool manager and namespace store
- services/: platform database access and the tenant provisioner
"""

from .entities import ConnectionDescriptor, TenantDatabaseConfig, TenantRegistry, NamespaceStore
from .repositories import ConnectionPoolManager, TenantConnectionPool
from .services import TenantProvisioner, DeprovisionResult

__all__ = [
    "ConnectionDescriptor",
    "TenantDatabaseConfig",
    "TenantRegistry",
    "NamespaceStore",
    "ConnectionPoolManager",
    "TenantConnectionPool",
    "TenantProvisioner",
    "DeprovisionResult",
]
