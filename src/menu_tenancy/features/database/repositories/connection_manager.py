"""Per-tenant connection pool manager."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

import asyncpg

from ..entities.connection_descriptor import ConnectionDescriptor
from ..entities.protocols import ConnectionPool, PoolFactory, TenantRegistry
from ..utils.connection_factory import ConnectionFactory
from ....core.exceptions import ConnectionPoolError, MenuTenancyError, TenantUnconfigured
from ....core.value_objects import TenantId

logger = logging.getLogger(__name__)


@dataclass
class PoolMetrics:
    """Metrics for one tenant pool."""
    total_connections: int = 0
    active_connections: int = 0
    idle_connections: int = 0
    total_acquisitions: int = 0
    failed_acquisitions: int = 0
    created_at: Optional[datetime] = None


class TenantConnectionPool(ConnectionPool):
    """ConnectionPool for one tenant, using asyncpg."""

    def __init__(
        self,
        tenant_id: TenantId,
        descriptor: ConnectionDescriptor,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 30,
    ):
        self.tenant_id = tenant_id
        self.descriptor = descriptor
        self._min_size = min_size
        self._max_size = max_size
        self._timeout = timeout
        self._pool: Optional[asyncpg.Pool] = None
        self._metrics = PoolMetrics()
        self._is_closing = False

    async def open(self) -> None:
        if self._pool is None:
            self._pool = await ConnectionFactory.create_pool(
                self.descriptor,
                min_size=self._min_size,
                max_size=self._max_size,
                timeout=self._timeout,
            )
            self._metrics.created_at = datetime.now(timezone.utc)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Get a connection within a context manager."""
        if self._is_closing or self._pool is None:
            raise ConnectionPoolError(f"Pool for tenant {self.tenant_id} is not open")

        try:
            conn = await self._pool.acquire(timeout=self._timeout)
        except Exception as e:
            self._metrics.failed_acquisitions += 1
            logger.error(f"Failed to acquire connection for tenant {self.tenant_id}: {e}")
            raise ConnectionPoolError(f"Failed to acquire connection: {e}") from e

        self._metrics.total_acquisitions += 1
        self._metrics.active_connections += 1
        try:
            yield conn
        finally:
            self._metrics.active_connections = max(0, self._metrics.active_connections - 1)
            await self._pool.release(conn)

    async def close(self) -> None:
        self._is_closing = True
        if self._pool is not None:
            pool, self._pool = self._pool, None
            await pool.close()
            logger.info(f"Closed connection pool for tenant {self.tenant_id}")

    @property
    def size(self) -> int:
        if self._pool:
            return self._pool.get_size()
        return 0

    @property
    def free_size(self) -> int:
        if self._pool:
            return self._pool.get_idle_size()
        return 0

    def metrics_snapshot(self) -> Dict[str, Any]:
        self._metrics.total_connections = self.size
        self._metrics.idle_connections = self.free_size
        snapshot = asdict(self._metrics)
        snapshot["namespace"] = self.descriptor.namespace
        return snapshot


class AsyncpgPoolFactory(PoolFactory):
    """Builds and opens a TenantConnectionPool per tenant."""

    def __init__(self, min_size: int = 1, max_size: int = 10, timeout: float = 30):
        self.min_size = min_size
        self.max_size = max_size
        self.timeout = timeout

    async def __call__(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> TenantConnectionPool:
        pool = TenantConnectionPool(
            tenant_id, descriptor,
            min_size=self.min_size, max_size=self.max_size, timeout=self.timeout,
        )
        await pool.open()
        return pool


class ConnectionPoolManager:
    """Owns at most one pool per tenant id in this process.

    Pools are created lazily on first use from the tenant's registry entry.
    Creation is serialized per tenant id, so concurrent first requests for
    one tenant build a single pool while other tenants proceed in parallel.
    """

    def __init__(
        self,
        registry: TenantRegistry,
        pool_factory: PoolFactory,
        close_timeout: float = 10.0,
    ):
        self._registry = registry
        self._pool_factory = pool_factory
        self._close_timeout = close_timeout
        self._pools: Dict[str, ConnectionPool] = {}
        self._key_locks: Dict[str, asyncio.Lock] = {}
        self._closed = False

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = self._key_locks.setdefault(key, asyncio.Lock())
        return lock

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionPoolError("Connection pool manager is closed")

    async def get(self, tenant_id: TenantId) -> ConnectionPool:
        """Get or create the pool for a tenant.

        Raises:
            TenantUnconfigured: If the tenant has no registry entry
            ConnectionPoolError: If the manager is closed or the pool cannot be built
        """
        self._ensure_open()
        key = str(tenant_id)

        pool = self._pools.get(key)
        if pool is not None:
            return pool

        async with self._lock_for(key):
            self._ensure_open()
            # Double-check
            pool = self._pools.get(key)
            if pool is not None:
                return pool

            config = await self._registry.get(TenantId.of(tenant_id))
            if config is None:
                raise TenantUnconfigured(key)

            descriptor = config.descriptor
            try:
                pool = await self._pool_factory(TenantId.of(tenant_id), descriptor)
            except MenuTenancyError:
                raise
            except Exception as e:
                logger.error(f"Failed to create pool for tenant {key} ({descriptor.safe_uri}): {e}")
                raise ConnectionPoolError(f"Failed to create connection pool: {e}") from e

            if self._closed:
                # close_all ran while this pool was being built
                await self._close_quietly(key, pool)
                raise ConnectionPoolError("Connection pool manager is closed")

            self._pools[key] = pool
            logger.info(f"Created new pool for tenant {key}: {descriptor.safe_uri}")
            return pool

    @asynccontextmanager
    async def connection(self, tenant_id: TenantId) -> AsyncIterator[Any]:
        """Acquire a pooled connection for a tenant."""
        pool = await self.get(tenant_id)
        async with pool.connection() as conn:
            yield conn

    async def evict(self, tenant_id: TenantId) -> bool:
        """Close and forget one tenant's pool; returns False when none was cached."""
        key = str(tenant_id)
        async with self._lock_for(key):
            pool = self._pools.pop(key, None)
            if pool is None:
                return False
            await self._close_quietly(key, pool)
        logger.info(f"Evicted pool for tenant {key}")
        return True

    async def close_all(self, timeout: Optional[float] = None) -> None:
        """Close every pool concurrently, bounded by a timeout.

        Failures are logged, never raised. Further `get` calls are rejected.
        """
        self._closed = True
        pools = list(self._pools.items())
        self._pools.clear()
        if not pools:
            logger.info("Closed all connection pools")
            return

        timeout = self._close_timeout if timeout is None else timeout
        close_tasks = [self._close_quietly(key, pool) for key, pool in pools]
        try:
            await asyncio.wait_for(asyncio.gather(*close_tasks, return_exceptions=True), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Timed out after {timeout}s closing {len(pools)} tenant pool(s)")
            return

        logger.info(f"Closed all connection pools ({len(pools)})")

    async def _close_quietly(self, key: str, pool: ConnectionPool) -> None:
        try:
            await pool.close()
        except Exception as e:
            logger.error(f"Error closing pool for tenant {key}: {e}")

    def pool_metrics(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot of per-tenant pool sizes."""
        return {key: pool.metrics_snapshot() for key, pool in self._pools.items()}

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __contains__(self, tenant_id: object) -> bool:
        return str(tenant_id) in self._pools

    def __len__(self) -> int:
        return len(self._pools)
