"""Database protocols for menu-tenancy."""

from abc import abstractmethod
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, runtime_checkable

from ....core.value_objects import TenantId
from .connection_descriptor import ConnectionDescriptor
from .tenant_database_config import TenantDatabaseConfig


@runtime_checkable
class TenantRegistry(Protocol):
    """Protocol for the persisted tenant -> connection descriptor mapping."""

    @abstractmethod
    async def get(self, tenant_id: TenantId) -> Optional[TenantDatabaseConfig]:
        """Get the database config for a tenant, or None."""
        ...

    @abstractmethod
    async def upsert(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> TenantDatabaseConfig:
        """Insert or replace a tenant's descriptor."""
        ...

    @abstractmethod
    async def remove(self, tenant_id: TenantId) -> bool:
        """Remove a tenant's entry; returns False when absent."""
        ...

    @abstractmethod
    async def list_all(self) -> List[TenantDatabaseConfig]:
        """List every registered tenant database."""
        ...


@runtime_checkable
class NamespaceStore(Protocol):
    """Protocol for the storage engine that hosts tenant namespaces.

    The store must support creating an isolated namespace, creating tables
    if absent inside it, and dropping it.
    """

    @abstractmethod
    async def namespace_exists(self, namespace: str) -> bool:
        ...

    @abstractmethod
    async def create_namespace(self, namespace: str) -> bool:
        """Create the namespace if absent; returns True when it was created."""
        ...

    @abstractmethod
    async def bootstrap_schema(self, descriptor: ConnectionDescriptor) -> None:
        """Create the catalog tables inside the namespace if absent."""
        ...

    @abstractmethod
    async def drop_namespace(self, namespace: str) -> bool:
        """Drop the namespace if present; returns True when it existed."""
        ...


@runtime_checkable
class ConnectionPool(Protocol):
    """Protocol for one tenant's connection pool."""

    @abstractmethod
    async def open(self) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...

    @abstractmethod
    def connection(self) -> AsyncContextManager[Any]:
        """Acquire a connection within a context manager."""
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        ...

    @property
    @abstractmethod
    def free_size(self) -> int:
        ...

    @abstractmethod
    def metrics_snapshot(self) -> Dict[str, Any]:
        ...


@runtime_checkable
class PoolFactory(Protocol):
    """Callable building an opened pool for a tenant descriptor."""

    async def __call__(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> ConnectionPool:
        ...
