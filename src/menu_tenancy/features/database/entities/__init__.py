"""Database entities and protocols."""

from .connection_descriptor import ConnectionDescriptor
from .tenant_database_config import TenantDatabaseConfig
from .protocols import TenantRegistry, NamespaceStore, ConnectionPool, PoolFactory

__all__ = [
    "ConnectionDescriptor",
    "TenantDatabaseConfig",
    "TenantRegistry",
    "NamespaceStore",
    "ConnectionPool",
    "PoolFactory",
]
