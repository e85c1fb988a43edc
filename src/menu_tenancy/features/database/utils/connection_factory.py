"""Asyncpg connection factory shared by the store, pools and platform access."""

import asyncio
import logging
from typing import Optional

import asyncpg

from ..entities.connection_descriptor import ConnectionDescriptor
from ....core.exceptions import ConnectionPoolError, DatabaseError

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """Factory for creating asyncpg connections and pools with standard error handling."""

    @staticmethod
    async def create_connection(
        descriptor: ConnectionDescriptor,
        timeout: Optional[float] = None,
        database: Optional[str] = None,
    ) -> asyncpg.Connection:
        """Create a single asyncpg connection from a descriptor.

        Args:
            descriptor: Connection descriptor
            timeout: Connection timeout in seconds (default: 10)
            database: Connect to this database instead of the descriptor's namespace

        Raises:
            DatabaseError: If connection fails
        """
        try:
            return await asyncio.wait_for(
                asyncpg.connect(
                    host=descriptor.host,
                    port=descriptor.port,
                    user=descriptor.user,
                    password=descriptor.password or None,
                    database=database or descriptor.namespace,
                ),
                timeout=timeout or 10,
            )
        except Exception as e:
            logger.error(f"Failed to connect to {descriptor.safe_uri}: {e}")
            raise DatabaseError(f"Connection failed: {e}") from e

    @staticmethod
    async def create_pool(
        descriptor: ConnectionDescriptor,
        min_size: int = 1,
        max_size: int = 10,
        timeout: Optional[float] = None,
    ) -> asyncpg.Pool:
        """Create an asyncpg pool for a descriptor.

        Raises:
            ConnectionPoolError: If the pool cannot be created
        """
        try:
            pool = await asyncpg.create_pool(
                host=descriptor.host,
                port=descriptor.port,
                user=descriptor.user,
                password=descriptor.password or None,
                database=descriptor.namespace,
                min_size=min_size,
                max_size=max_size,
                timeout=timeout or 30,
            )
        except Exception as e:
            logger.error(f"Failed to create pool for {descriptor.safe_uri}: {e}")
            raise ConnectionPoolError(f"Failed to create connection pool: {e}") from e

        logger.info(f"Created connection pool for {descriptor.safe_uri}: min={min_size}, max={max_size}")
        return pool

    @staticmethod
    async def create_pool_from_url(
        url: str,
        min_size: int = 1,
        max_size: int = 10,
        name: str = "platform",
    ) -> asyncpg.Pool:
        """Create a pool from a database URL (used for the platform database)."""
        try:
            return await asyncpg.create_pool(url, min_size=min_size, max_size=max_size)
        except Exception as e:
            logger.error(f"Failed to create {name} pool: {e}")
            raise ConnectionPoolError(f"Failed to create {name} pool: {e}") from e
