"""Database repositories."""

from .connection_manager import (
    AsyncpgPoolFactory,
    ConnectionPoolManager,
    PoolMetrics,
    TenantConnectionPool,
)
from .namespace_store import PostgresNamespaceStore
from .tenant_registry import InMemoryTenantRegistry, PostgresTenantRegistry

__all__ = [
    "AsyncpgPoolFactory",
    "ConnectionPoolManager",
    "PoolMetrics",
    "TenantConnectionPool",
    "PostgresNamespaceStore",
    "InMemoryTenantRegistry",
    "PostgresTenantRegistry",
]
