"""Tenant registry implementations.

The registry maps each tenant to the connection descriptor of its isolated
database. Writing an entry is the commit point of provisioning.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..entities.connection_descriptor import ConnectionDescriptor
from ..entities.protocols import TenantRegistry
from ..entities.tenant_database_config import TenantDatabaseConfig
from ..services.platform_database import PlatformDatabase
from ..utils import queries
from ..utils.encryption import DescriptorEncryption
from ....core.exceptions import RegistryError
from ....core.value_objects import TenantId

logger = logging.getLogger(__name__)


class InMemoryTenantRegistry(TenantRegistry):
    """In-memory implementation of TenantRegistry."""

    def __init__(self):
        self._configs: Dict[str, TenantDatabaseConfig] = {}
        self._lock = asyncio.Lock()

    async def get(self, tenant_id: TenantId) -> Optional[TenantDatabaseConfig]:
        async with self._lock:
            return self._configs.get(str(tenant_id))

    async def upsert(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> TenantDatabaseConfig:
        async with self._lock:
            key = str(tenant_id)
            now = datetime.now(timezone.utc)
            existing = self._configs.get(key)
            config = TenantDatabaseConfig(
                tenant_id=tenant_id,
                connection_descriptor=descriptor.to_uri(),
                created_at=existing.created_at if existing else now,
                updated_at=now,
            )
            self._configs[key] = config
            logger.info(f"Registered database for tenant {key}: {descriptor.safe_uri}")
            return config

    async def remove(self, tenant_id: TenantId) -> bool:
        async with self._lock:
            removed = self._configs.pop(str(tenant_id), None) is not None
            if removed:
                logger.info(f"Removed database registration for tenant {tenant_id}")
            return removed

    async def list_all(self) -> List[TenantDatabaseConfig]:
        async with self._lock:
            return list(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)


class PostgresTenantRegistry(TenantRegistry):
    """TenantRegistry backed by the platform `tenant_databases` table.

    When an encryption helper is supplied, descriptors are stored encrypted
    and decrypted on read. Plain rows written before a key was configured are
    still readable.
    """

    def __init__(self, database: PlatformDatabase, encryption: Optional[DescriptorEncryption] = None):
        self._db = database
        self._encryption = encryption

    async def ensure_table(self) -> None:
        await self._db.execute(queries.REGISTRY_CREATE_TABLE)

    def _to_config(self, row: Dict[str, Any]) -> TenantDatabaseConfig:
        stored = row["connection_url"]
        if self._encryption is not None:
            stored = self._encryption.reveal(stored)
        return TenantDatabaseConfig(
            tenant_id=row["restaurant_id"],
            connection_descriptor=stored,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def get(self, tenant_id: TenantId) -> Optional[TenantDatabaseConfig]:
        try:
            row = await self._db.fetchrow(queries.REGISTRY_SELECT, str(tenant_id))
        except Exception as e:
            logger.error(f"Registry lookup failed for tenant {tenant_id}: {e}")
            raise RegistryError(f"Failed to read registry entry: {e}") from e
        return self._to_config(row) if row else None

    async def upsert(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> TenantDatabaseConfig:
        value = descriptor.to_uri()
        if self._encryption is not None:
            value = self._encryption.encrypt(value)
        try:
            row = await self._db.fetchrow(queries.REGISTRY_UPSERT, str(tenant_id), value)
        except Exception as e:
            logger.error(f"Registry upsert failed for tenant {tenant_id}: {e}")
            raise RegistryError(f"Failed to write registry entry: {e}") from e

        logger.info(f"Registered database for tenant {tenant_id}: {descriptor.safe_uri}")
        return self._to_config(row)

    async def remove(self, tenant_id: TenantId) -> bool:
        try:
            status = await self._db.execute(queries.REGISTRY_DELETE, str(tenant_id))
        except Exception as e:
            raise RegistryError(f"Failed to remove registry entry: {e}") from e
        # asyncpg returns e.g. "DELETE 1"
        return status.split()[-1] != "0"

    async def list_all(self) -> List[TenantDatabaseConfig]:
        rows = await self._db.fetch(queries.REGISTRY_SELECT_ALL)
        return [self._to_config(row) for row in rows]
