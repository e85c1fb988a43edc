"""Access to the shared platform database (tenants, subscriptions, registry)."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg

from ..utils.connection_factory import ConnectionFactory
from ....core.exceptions import ConnectionPoolError

logger = logging.getLogger(__name__)


class PlatformDatabase:
    """Lazily opened asyncpg pool for the platform database."""

    def __init__(self, url: str, min_size: int = 1, max_size: int = 10):
        if not url:
            raise ConnectionPoolError("Platform database URL is not configured")
        self._url = url
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def _ensure_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            async with self._lock:
                if self._pool is None:  # Double-check
                    self._pool = await ConnectionFactory.create_pool_from_url(
                        self._url, self._min_size, self._max_size
                    )
                    logger.info("Opened platform database pool")
        return self._pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        pool = await self._ensure_pool()
        async with pool.acquire() as conn:
            yield conn

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        async with self.connection() as conn:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

    async def fetchrow(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        async with self.connection() as conn:
            row = await conn.fetchrow(query, *args)
            return dict(row) if row else None

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.connection() as conn:
            return await conn.fetchval(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        async with self.connection() as conn:
            return await conn.execute(query, *args)

    async def close(self) -> None:
        if self._pool is not None:
            async with self._lock:
                if self._pool is not None:
                    await self._pool.close()
                    self._pool = None
                    logger.info("Closed platform database pool")
