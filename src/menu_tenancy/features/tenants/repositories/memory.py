"""In-memory tenant and subscription repositories.

Used for local development without a platform database and as test doubles.
"""

import asyncio
import itertools
import logging
from typing import Dict, List, Optional

from ..entities.protocols import SubscriptionRepository, TenantRepository
from ..entities.tenant import SubscriptionWindow, Tenant
from ....core.exceptions import DuplicateTenantError
from ....core.value_objects import TenantId

logger = logging.getLogger(__name__)


class InMemoryTenantRepository(TenantRepository):
    """Tenant repository keeping rows in process memory."""

    def __init__(self, tenants: Optional[List[Tenant]] = None):
        self._by_id: Dict[str, Tenant] = {}
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)
        for tenant in tenants or []:
            self._by_id[str(tenant.id)] = tenant
        if self._by_id:
            numeric = [int(key) for key in self._by_id if key.isdigit()]
            self._ids = itertools.count(max(numeric, default=0) + 1)

    async def find_by_slug(self, slug: str) -> Optional[Tenant]:
        for tenant in self._by_id.values():
            if tenant.slug == slug:
                return tenant
        return None

    async def find_by_id(self, tenant_id: TenantId) -> Optional[Tenant]:
        return self._by_id.get(str(tenant_id))

    async def slug_exists(self, slug: str) -> bool:
        return await self.find_by_slug(slug) is not None

    async def save(self, name: str, slug: str) -> Tenant:
        async with self._lock:
            if await self.slug_exists(slug):
                raise DuplicateTenantError(slug)
            tenant = Tenant(id=next(self._ids), slug=slug, name=name)
            self._by_id[str(tenant.id)] = tenant
            logger.info(f"Created tenant {tenant.id} ({slug})")
            return tenant

    async def delete(self, tenant_id: TenantId) -> bool:
        async with self._lock:
            return self._by_id.pop(str(tenant_id), None) is not None

    async def list_all(self) -> List[Tenant]:
        return sorted(self._by_id.values(), key=lambda t: t.created_at)


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Subscription windows kept in memory, newest first per tenant."""

    def __init__(self):
        self._windows: Dict[str, List[SubscriptionWindow]] = {}

    async def find_by_tenant(self, tenant_id: TenantId) -> List[SubscriptionWindow]:
        return list(self._windows.get(str(tenant_id), []))

    async def save(self, window: SubscriptionWindow) -> SubscriptionWindow:
        self._windows.setdefault(str(window.tenant_id), []).insert(0, window)
        return window
