"""Tenant and subscription repositories on the platform database."""

import logging
from typing import Any, Dict, List, Optional, Union

import asyncpg

from ..entities.protocols import SubscriptionRepository, TenantRepository
from ..entities.tenant import SubscriptionWindow, Tenant
from ....core.exceptions import DatabaseError, DuplicateTenantError
from ....core.value_objects import TenantId
from ...database.services.platform_database import PlatformDatabase
from ...database.utils import queries

logger = logging.getLogger(__name__)


def _db_id(tenant_id: TenantId) -> Union[int, str]:
    """Platform ids are BIGSERIAL; asyncpg needs ints for them."""
    value = str(tenant_id)
    return int(value) if value.isdigit() else value


def _to_tenant(row: Dict[str, Any]) -> Tenant:
    return Tenant(id=row["id"], slug=row["slug"], name=row["name"], created_at=row["created_at"])


class PostgresTenantRepository(TenantRepository):
    """Tenants stored in the platform `restaurants` table."""

    def __init__(self, database: PlatformDatabase):
        self._db = database

    async def find_by_slug(self, slug: str) -> Optional[Tenant]:
        row = await self._db.fetchrow(queries.TENANT_SELECT_BY_SLUG, slug)
        return _to_tenant(row) if row else None

    async def find_by_id(self, tenant_id: TenantId) -> Optional[Tenant]:
        row = await self._db.fetchrow(queries.TENANT_SELECT_BY_ID, _db_id(tenant_id))
        return _to_tenant(row) if row else None

    async def slug_exists(self, slug: str) -> bool:
        return bool(await self._db.fetchval(queries.TENANT_SLUG_EXISTS, slug))

    async def save(self, name: str, slug: str) -> Tenant:
        try:
            row = await self._db.fetchrow(queries.TENANT_INSERT, name, slug)
        except asyncpg.exceptions.UniqueViolationError as e:
            raise DuplicateTenantError(slug) from e
        if not row:
            raise DatabaseError("Failed to create tenant")
        tenant = _to_tenant(row)
        logger.info(f"Created tenant {tenant.id} ({slug})")
        return tenant

    async def delete(self, tenant_id: TenantId) -> bool:
        status = await self._db.execute(queries.TENANT_DELETE, _db_id(tenant_id))
        return status.split()[-1] != "0"


class PostgresSubscriptionRepository(SubscriptionRepository):
    """Subscription windows read from the platform `subscriptions` table."""

    def __init__(self, database: PlatformDatabase):
        self._db = database

    async def find_by_tenant(self, tenant_id: TenantId) -> List[SubscriptionWindow]:
        rows = await self._db.fetch(queries.SUBSCRIPTIONS_BY_TENANT, _db_id(tenant_id))
        return [
            SubscriptionWindow(
                tenant_id=row["restaurant_id"],
                status=row["status"],
                start_date=row["start_date"],
                end_date=row["end_date"],
                package_type=row["package_type"],
            )
            for row in rows
        ]

    async def save(self, window: SubscriptionWindow) -> SubscriptionWindow:
        await self._db.execute(
            queries.SUBSCRIPTION_INSERT,
            _db_id(window.tenant_id),
            window.package_type,
            window.start_date,
            window.end_date,
            window.status,
        )
        return window
