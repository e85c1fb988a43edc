"""Pytest configuration and fixtures for menu-tenancy tests.

No live database is needed: the namespace store, the pool factory and the
tenant connections are in-memory fakes.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from menu_tenancy.config.settings import TenancySettings
from menu_tenancy.core.value_objects import TenantId
from menu_tenancy.features.database.entities.connection_descriptor import ConnectionDescriptor
from menu_tenancy.features.database.repositories.tenant_registry import InMemoryTenantRegistry
from menu_tenancy.features.gate.rate_limiter import InMemoryRateLimitStore
from menu_tenancy.features.tenants.entities.tenant import SubscriptionWindow, Tenant
from menu_tenancy.features.tenants.repositories.memory import (
    InMemorySubscriptionRepository,
    InMemoryTenantRepository,
)
from menu_tenancy.infrastructure.fastapi.container import build_container
from menu_tenancy.infrastructure.fastapi.factory import create_app


class FakeConnection:
    """Stands in for an asyncpg connection to a tenant database."""

    def __init__(self, rows_by_table: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.rows_by_table = rows_by_table or {}
        self.queries: List[str] = []

    async def fetch(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        self.queries.append(query)
        for table, rows in self.rows_by_table.items():
            if f"FROM {table}" in query:
                return rows
        return []


class FakePool:
    """ConnectionPool double that records open/close."""

    def __init__(self, tenant_id: TenantId, descriptor: ConnectionDescriptor, close_error: Optional[Exception] = None,
                 connection: Optional[FakeConnection] = None):
        self.tenant_id = tenant_id
        self.descriptor = descriptor
        self.close_error = close_error
        self.conn = connection or FakeConnection()
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True
        if self.close_error:
            raise self.close_error

    @asynccontextmanager
    async def connection(self):
        yield self.conn

    @property
    def size(self) -> int:
        return 1 if self.opened and not self.closed else 0

    @property
    def free_size(self) -> int:
        return self.size

    def metrics_snapshot(self) -> Dict[str, Any]:
        return {"total_connections": self.size, "namespace": self.descriptor.namespace}


class CountingPoolFactory:
    """Pool factory that counts creations and can be told to fail."""

    def __init__(self, delay: float = 0.01, connection: Optional[FakeConnection] = None):
        self.delay = delay
        self.connection = connection
        self.calls: List[str] = []
        self.pools: List[FakePool] = []
        self.fail_with: Optional[Exception] = None
        self.close_errors: Dict[str, Exception] = {}

    async def __call__(self, tenant_id: TenantId, descriptor: ConnectionDescriptor) -> FakePool:
        self.calls.append(str(tenant_id))
        # Yield to the loop so concurrent callers genuinely overlap
        await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        pool = FakePool(tenant_id, descriptor, self.close_errors.get(str(tenant_id)), self.connection)
        await pool.open()
        self.pools.append(pool)
        return pool


class FakeNamespaceStore:
    """NamespaceStore double keeping namespaces and tables in sets."""

    def __init__(self):
        self.namespaces: set = set()
        self.tables: Dict[str, set] = {}
        self.calls: List[str] = []
        self.fail_on: Dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise self.fail_on[operation]

    async def namespace_exists(self, namespace: str) -> bool:
        return namespace in self.namespaces

    async def create_namespace(self, namespace: str) -> bool:
        self._maybe_fail("create_namespace")
        if namespace in self.namespaces:
            return False
        self.namespaces.add(namespace)
        return True

    async def bootstrap_schema(self, descriptor: ConnectionDescriptor) -> None:
        self._maybe_fail("bootstrap_schema")
        self.tables.setdefault(descriptor.namespace, set()).update({"categories", "menu_items"})

    async def drop_namespace(self, namespace: str) -> bool:
        self._maybe_fail("drop_namespace")
        existed = namespace in self.namespaces
        self.namespaces.discard(namespace)
        self.tables.pop(namespace, None)
        return existed


class FakeClock:
    """Manually advanced clock for rate limit tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment and .env file."""
    return TenancySettings(
        _env_file=None,
        environment="testing",
        root_domain="menu.example.com",
        dev_host_suffix=".localhost",
        tenant_domain_map='{"foodie.com": "pasta-house"}',
        default_tenant_slug=None,
        admin_host="admin.menu.example.com",
        platform_database_url=None,
        provision_db_host="db.internal",
        provision_db_port=5432,
        provision_db_user="provisioner",
        provision_db_password="s3cret",
        rate_limit_backend="memory",
        rate_limit_window_seconds=60,
        rate_limit_max_requests=120,
        app_encryption_key=None,
    )


@pytest.fixture
def admin_descriptor():
    return ConnectionDescriptor(
        host="db.internal", port=5432, user="provisioner", password="s3cret", namespace="postgres"
    )


@pytest.fixture
def pasta_house():
    return Tenant(id=1, slug="pasta-house", name="Pasta House")


@pytest.fixture
def tenant_repository(pasta_house):
    return InMemoryTenantRepository([pasta_house])


@pytest.fixture
def active_window(pasta_house):
    return SubscriptionWindow(
        tenant_id=pasta_house.id,
        status="active",
        start_date=date.today() - timedelta(days=10),
        end_date=date.today() + timedelta(days=20),
        package_type="basic",
    )


@pytest_asyncio.fixture
async def subscription_repository(active_window):
    repository = InMemorySubscriptionRepository()
    await repository.save(active_window)
    return repository


@pytest_asyncio.fixture
async def registry(pasta_house, admin_descriptor):
    registry = InMemoryTenantRegistry()
    await registry.upsert(pasta_house.id, admin_descriptor.with_namespace("menu_tenant_pasta_house"))
    return registry


@pytest.fixture
def namespace_store():
    return FakeNamespaceStore()


@pytest.fixture
def menu_connection():
    return FakeConnection({
        "categories": [
            {"id": 1, "name": "Pasta", "description": "Fresh every day"},
            {"id": 2, "name": "Desserts", "description": None},
        ],
        "menu_items": [
            {"id": 10, "category_id": 1, "name": "Carbonara", "description": None,
             "price": "12.50", "image_url": None},
            {"id": 11, "category_id": 1, "name": "Arrabbiata", "description": "Spicy",
             "price": "11.00", "image_url": None},
        ],
    })


@pytest.fixture
def pool_factory(menu_connection):
    return CountingPoolFactory(connection=menu_connection)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def container(settings, tenant_repository, subscription_repository, registry, namespace_store, pool_factory):
    return build_container(
        settings,
        tenants=tenant_repository,
        subscriptions=subscription_repository,
        registry=registry,
        store=namespace_store,
        pool_factory=pool_factory,
        rate_limit_store=InMemoryRateLimitStore(),
    )


@pytest.fixture
def app(settings, container):
    return create_app(settings=settings, container=container)


@pytest_asyncio.fixture
async def client(app):
    """Client whose requests arrive on the pasta-house storefront host."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://pasta-house.menu.example.com"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def admin_client(app):
    """Client whose requests arrive on the admin host."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://admin.menu.example.com"
    ) as client:
        yield client
