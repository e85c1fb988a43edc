"""Application service container.

One container per process owns every long-lived collaborator: repositories,
the tenant registry, the pool manager, the provisioner and the request gate.
It is stored on `app.state.container` and reached through dependencies.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...config.settings import TenancySettings
from ...core.exceptions import DatabaseConfigurationError
from ...features.database.entities.connection_descriptor import ConnectionDescriptor
from ...features.database.entities.protocols import NamespaceStore, PoolFactory, TenantRegistry
from ...features.database.repositories.connection_manager import AsyncpgPoolFactory, ConnectionPoolManager
from ...features.database.repositories.namespace_store import PostgresNamespaceStore
from ...features.database.repositories.tenant_registry import InMemoryTenantRegistry, PostgresTenantRegistry
from ...features.database.services.platform_database import PlatformDatabase
from ...features.database.services.provisioner import TenantProvisioner
from ...features.database.utils.encryption import build_encryption
from ...features.gate.rate_limiter import InMemoryRateLimitStore, RateLimiter, RateLimitStore, RedisRateLimitStore
from ...features.gate.request_gate import RequestGate
from ...features.gate.subscription_gate import SubscriptionGate
from ...features.tenants.entities.protocols import SubscriptionRepository, TenantRepository
from ...features.tenants.repositories.memory import InMemorySubscriptionRepository, InMemoryTenantRepository
from ...features.tenants.repositories.postgres import PostgresSubscriptionRepository, PostgresTenantRepository
from ...features.tenants.services.domain_map import DomainMap
from ...features.tenants.services.tenant_lifecycle import TenantLifecycleService
from ...features.tenants.services.tenant_resolver import TenantResolver

logger = logging.getLogger(__name__)


@dataclass
class TenancyContainer:
    """Wired collaborators for one application instance."""

    settings: TenancySettings
    tenants: TenantRepository
    subscriptions: SubscriptionRepository
    registry: TenantRegistry
    pools: ConnectionPoolManager
    provisioner: TenantProvisioner
    resolver: TenantResolver
    gate: RequestGate
    lifecycle: TenantLifecycleService
    platform_database: Optional[PlatformDatabase] = None

    @property
    def rate_limiter(self) -> RateLimiter:
        return self.gate.rate_limiter

    async def startup(self) -> None:
        if isinstance(self.registry, PostgresTenantRegistry):
            await self.registry.ensure_table()
        logger.info(
            f"Tenancy container started (registry={type(self.registry).__name__}, "
            f"rate_limit_store={type(self.rate_limiter.store).__name__})"
        )

    async def shutdown(self) -> None:
        """Drain tenant pools, then release shared connections."""
        await self.pools.close_all(timeout=self.settings.pool_close_timeout_seconds)

        store = self.rate_limiter.store
        if isinstance(store, RedisRateLimitStore):
            try:
                await store.close()
            except Exception as e:
                logger.warning(f"Error closing Redis rate limit store: {e}")

        if self.platform_database is not None:
            await self.platform_database.close()


def admin_descriptor_from_settings(settings: TenancySettings) -> ConnectionDescriptor:
    """Administrative credentials, pointed at the maintenance database."""
    return ConnectionDescriptor(
        scheme=settings.provision_db_scheme,
        user=settings.provision_db_user,
        password=settings.get_provision_password(),
        host=settings.provision_db_host,
        port=settings.provision_db_port,
        namespace=settings.provision_db_maintenance_database,
    )


def build_rate_limit_store(settings: TenancySettings) -> RateLimitStore:
    if settings.rate_limit_backend == "redis":
        if not settings.redis_url:
            raise DatabaseConfigurationError("RATE_LIMIT_BACKEND=redis requires REDIS_URL")
        return RedisRateLimitStore.from_url(settings.redis_url)
    return InMemoryRateLimitStore()


def build_container(
    settings: TenancySettings,
    *,
    tenants: Optional[TenantRepository] = None,
    subscriptions: Optional[SubscriptionRepository] = None,
    registry: Optional[TenantRegistry] = None,
    store: Optional[NamespaceStore] = None,
    pool_factory: Optional[PoolFactory] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
    domain_map: Optional[DomainMap] = None,
) -> TenancyContainer:
    """Wire a container from settings; any collaborator may be supplied instead.

    With a platform database URL the asyncpg repositories are used, otherwise
    everything platform-side lives in memory.
    """
    platform_database = None
    if settings.platform_database_url and (tenants is None or subscriptions is None or registry is None):
        platform_database = PlatformDatabase(
            settings.platform_database_url,
            min_size=settings.platform_pool_min_size,
            max_size=settings.platform_pool_max_size,
        )

    if platform_database is not None:
        tenants = tenants if tenants is not None else PostgresTenantRepository(platform_database)
        if subscriptions is None:
            subscriptions = PostgresSubscriptionRepository(platform_database)
        registry = registry if registry is not None else PostgresTenantRegistry(
            platform_database, build_encryption(settings.get_encryption_key())
        )
    else:
        if not settings.platform_database_url:
            logger.warning("PLATFORM_DATABASE_URL not set; using in-memory platform repositories")
        tenants = tenants if tenants is not None else InMemoryTenantRepository()
        subscriptions = subscriptions if subscriptions is not None else InMemorySubscriptionRepository()
        registry = registry if registry is not None else InMemoryTenantRegistry()

    admin_descriptor = admin_descriptor_from_settings(settings)
    store = store if store is not None else PostgresNamespaceStore(
        admin_descriptor,
        maintenance_database=settings.provision_db_maintenance_database,
        timeout=settings.provision_timeout_seconds,
    )
    pool_factory = pool_factory if pool_factory is not None else AsyncpgPoolFactory(
        min_size=settings.tenant_pool_min_size,
        max_size=settings.tenant_pool_max_size,
        timeout=settings.tenant_pool_timeout_seconds,
    )

    pools = ConnectionPoolManager(registry, pool_factory, close_timeout=settings.pool_close_timeout_seconds)
    provisioner = TenantProvisioner(
        store,
        registry,
        admin_descriptor,
        prefix=settings.tenant_db_prefix,
        timeout=settings.provision_timeout_seconds,
    )
    resolver = TenantResolver.from_settings(settings, tenants, domain_map=domain_map)
    rate_limiter = RateLimiter(
        rate_limit_store if rate_limit_store is not None else build_rate_limit_store(settings),
        window_seconds=settings.rate_limit_window_seconds,
        max_requests=settings.rate_limit_max_requests,
    )
    gate = RequestGate(rate_limiter, SubscriptionGate(subscriptions))
    lifecycle = TenantLifecycleService(tenants, provisioner, registry, pools)

    return TenancyContainer(
        settings=settings,
        tenants=tenants,
        subscriptions=subscriptions,
        registry=registry,
        pools=pools,
        provisioner=provisioner,
        resolver=resolver,
        gate=gate,
        lifecycle=lifecycle,
        platform_database=platform_database,
    )
