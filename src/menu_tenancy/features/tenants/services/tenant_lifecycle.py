"""Tenant lifecycle: create with provisioning, delete with teardown, reconfigure."""

import logging
from typing import Optional, Tuple

from ..entities.protocols import TenantRepository
from ..entities.tenant import Tenant
from ..utils.validation import TenantValidationRules, ensure_unique_slug
from ....core.exceptions import InvalidNamespaceError, ProvisioningFailed, TenantNotFound
from ....core.value_objects import TenantId
from ...database.entities.connection_descriptor import ConnectionDescriptor
from ...database.entities.protocols import TenantRegistry
from ...database.entities.tenant_database_config import TenantDatabaseConfig
from ...database.repositories.connection_manager import ConnectionPoolManager
from ...database.services.provisioner import DeprovisionResult, TenantProvisioner

logger = logging.getLogger(__name__)


class TenantLifecycleService:
    """Orchestrates tenant rows, namespaces, registry entries and pools."""

    def __init__(
        self,
        tenants: TenantRepository,
        provisioner: TenantProvisioner,
        registry: TenantRegistry,
        pools: ConnectionPoolManager,
    ):
        self._tenants = tenants
        self._provisioner = provisioner
        self._registry = registry
        self._pools = pools

    async def create_tenant(
        self, name: str, slug: Optional[str] = None
    ) -> Tuple[Tenant, ConnectionDescriptor]:
        """Create a tenant and provision its database.

        If provisioning fails the tenant row is deleted again and the error
        is re-raised, so no tenant is left without a database.
        """
        if not name or not name.strip():
            raise ValueError("Tenant name cannot be empty")

        base = TenantValidationRules.slugify(slug or name)
        unique_slug = await ensure_unique_slug(base, self._tenants.slug_exists)
        tenant = await self._tenants.save(name.strip(), unique_slug)

        try:
            descriptor = await self._provisioner.provision(tenant)
        except (ProvisioningFailed, InvalidNamespaceError) as e:
            logger.error(f"Provisioning failed for new tenant {tenant.id}; removing it: {e}")
            try:
                await self._tenants.delete(tenant.id)
            except Exception as cleanup_error:
                logger.error(f"Failed to remove tenant {tenant.id} after provisioning failure: {cleanup_error}")
            raise

        logger.info(f"Created tenant {tenant.id} ({tenant.slug})")
        return tenant, descriptor

    async def delete_tenant(self, tenant_id: TenantId) -> DeprovisionResult:
        """Tear down a tenant: pool, namespace, registry entry, tenant row.

        Namespace teardown is best effort; its warnings are returned.
        """
        tenant = await self._tenants.find_by_id(TenantId.of(tenant_id))
        if tenant is None:
            raise TenantNotFound(str(tenant_id), field="id")

        await self._pools.evict(tenant.id)
        result = await self._provisioner.deprovision(tenant)
        await self._registry.remove(tenant.id)
        # A request during the drop may have rebuilt the pool from the old entry
        await self._pools.evict(tenant.id)
        await self._tenants.delete(tenant.id)

        logger.info(f"Deleted tenant {tenant.id} ({tenant.slug})")
        return result

    async def set_database_config(self, tenant_id: TenantId, descriptor: str) -> TenantDatabaseConfig:
        """Point a tenant at a different database.

        The cached pool is evicted so the next request connects with the new
        descriptor.
        """
        parsed = ConnectionDescriptor.from_uri(descriptor)
        tenant = await self._tenants.find_by_id(TenantId.of(tenant_id))
        if tenant is None:
            raise TenantNotFound(str(tenant_id), field="id")

        config = await self._registry.upsert(tenant.id, parsed)
        await self._pools.evict(tenant.id)
        logger.info(f"Updated database config for tenant {tenant.id}: {parsed.safe_uri}")
        return config
