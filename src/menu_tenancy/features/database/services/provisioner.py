"""Tenant database provisioning.

Provisioning creates a tenant's isolated namespace, bootstraps the catalog
tables and records the connection descriptor in the registry. The registry
write is the commit point: nothing is registered unless every earlier step
succeeded, and every step is idempotent so a failed attempt can be retried.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, List, Optional, TypeVar

from ..entities.connection_descriptor import ConnectionDescriptor
from ..entities.protocols import NamespaceStore, TenantRegistry
from ..utils.namespace import derive_namespace_name
from ....config.constants import NamespaceLimits
from ....core.exceptions import InvalidNamespaceError, MenuTenancyError, ProvisioningFailed
from ...tenants.entities.tenant import Tenant

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class DeprovisionResult:
    """Outcome of a best-effort namespace teardown."""

    ok: bool
    namespace: Optional[str] = None
    dropped: bool = False
    warnings: List[str] = field(default_factory=list)


class TenantProvisioner:
    """Creates and tears down tenant namespaces."""

    def __init__(
        self,
        store: NamespaceStore,
        registry: TenantRegistry,
        admin_descriptor: ConnectionDescriptor,
        prefix: str = NamespaceLimits.DEFAULT_PREFIX,
        timeout: Optional[float] = None,
    ):
        self._store = store
        self._registry = registry
        self._admin = admin_descriptor
        self._prefix = prefix
        self._timeout = timeout

    def namespace_for(self, tenant: Tenant) -> str:
        """Deterministic namespace name for a tenant.

        Raises:
            InvalidNamespaceError: If the slug has no usable characters
        """
        return derive_namespace_name(tenant.slug, self._prefix)

    async def _step(self, tenant: Tenant, step: str, awaitable: Awaitable[T]) -> T:
        try:
            if self._timeout:
                return await asyncio.wait_for(awaitable, timeout=self._timeout)
            return await awaitable
        except asyncio.TimeoutError as e:
            logger.error(f"Provisioning tenant {tenant.id} timed out at {step}")
            raise ProvisioningFailed(str(tenant.id), step, f"timed out after {self._timeout}s") from e
        except Exception as e:
            logger.error(f"Provisioning tenant {tenant.id} failed at {step}: {e}")
            reason = e.message if isinstance(e, MenuTenancyError) else str(e) or type(e).__name__
            raise ProvisioningFailed(str(tenant.id), step, reason) from e

    async def provision(self, tenant: Tenant) -> ConnectionDescriptor:
        """Provision a tenant's namespace and register its descriptor.

        Raises:
            InvalidNamespaceError: If no namespace name can be derived
            ProvisioningFailed: If any step up to the registry write fails
        """
        namespace = self.namespace_for(tenant)
        logger.info(f"Provisioning tenant {tenant.id} ({tenant.slug}) into {namespace}")

        created = await self._step(tenant, "create_namespace", self._store.create_namespace(namespace))
        descriptor = self._admin.with_namespace(namespace)
        await self._step(tenant, "bootstrap_schema", self._store.bootstrap_schema(descriptor))
        await self._step(tenant, "register", self._registry.upsert(tenant.id, descriptor))

        logger.info(
            f"Provisioned tenant {tenant.id}: {descriptor.safe_uri}"
            f"{'' if created else ' (namespace already existed)'}"
        )
        return descriptor

    async def deprovision(self, tenant: Tenant) -> DeprovisionResult:
        """Drop a tenant's namespace. Never raises.

        The namespace is taken from the stored descriptor when one exists,
        otherwise recomputed from the slug. Registry and tenant rows are left
        to the caller.
        """
        warnings: List[str] = []
        namespace: Optional[str] = None

        try:
            config = await self._registry.get(tenant.id)
        except Exception as e:
            config = None
            warnings.append(f"registry lookup failed: {e}")

        if config is not None:
            namespace = config.namespace
            if namespace is None:
                warnings.append("stored descriptor could not be parsed; using derived name")

        if namespace is None:
            try:
                namespace = self.namespace_for(tenant)
            except InvalidNamespaceError as e:
                warnings.append(e.message)

        if namespace is None:
            for warning in warnings:
                logger.warning(f"Deprovisioning tenant {tenant.id}: {warning}")
            return DeprovisionResult(ok=False, warnings=warnings)

        dropped = False
        ok = True
        try:
            dropped = await self._store.drop_namespace(namespace)
        except Exception as e:
            ok = False
            warnings.append(f"drop of {namespace} failed: {e}")

        for warning in warnings:
            logger.warning(f"Deprovisioning tenant {tenant.id}: {warning}")
        if ok:
            logger.info(f"Deprovisioned tenant {tenant.id} ({namespace}, dropped={dropped})")

        return DeprovisionResult(ok=ok, namespace=namespace, dropped=dropped, warnings=warnings)
