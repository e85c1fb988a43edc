"""End-to-end tenant flow against a fresh application.

Create a restaurant on the admin host, serve its menu on its own
subdomain, then delete it again.
"""

from datetime import date, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from menu_tenancy.core.value_objects import TenantId
from menu_tenancy.features.database.repositories.tenant_registry import InMemoryTenantRegistry
from menu_tenancy.features.gate.rate_limiter import InMemoryRateLimitStore
from menu_tenancy.features.tenants.entities.tenant import SubscriptionWindow
from menu_tenancy.features.tenants.repositories.memory import (
    InMemorySubscriptionRepository,
    InMemoryTenantRepository,
)
from menu_tenancy.infrastructure.fastapi.container import build_container
from menu_tenancy.infrastructure.fastapi.factory import create_app


@pytest.fixture
def fresh_container(settings, namespace_store, pool_factory):
    return build_container(
        settings,
        tenants=InMemoryTenantRepository(),
        subscriptions=InMemorySubscriptionRepository(),
        registry=InMemoryTenantRegistry(),
        store=namespace_store,
        pool_factory=pool_factory,
        rate_limit_store=InMemoryRateLimitStore(),
    )


@pytest_asyncio.fixture
async def clients(settings, fresh_container):
    app = create_app(settings=settings, container=fresh_container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://admin.menu.example.com") as admin, \
            AsyncClient(transport=transport, base_url="http://pasta-house.menu.example.com") as storefront:
        yield admin, storefront


class TestTenantFlow:

    @pytest.mark.asyncio
    async def test_create_serve_delete(self, clients, fresh_container, namespace_store, pool_factory):
        admin, storefront = clients

        # Unknown before creation
        assert (await storefront.get("/api/restaurant")).status_code == 404

        created = await admin.post("/admin/tenants", json={"name": "Pasta House!!"})
        assert created.status_code == 201
        tenant = created.json()["data"]["tenant"]
        assert tenant["slug"] == "pasta-house"
        assert created.json()["data"]["namespace"] == "menu_tenant_pasta_house"
        assert namespace_store.tables["menu_tenant_pasta_house"] == {"categories", "menu_items"}

        restaurant = await storefront.get("/api/restaurant")
        assert restaurant.json()["data"] == {"id": tenant["id"], "slug": "pasta-house", "source": "root_domain"}

        # No subscription yet
        assert (await storefront.get("/api/public/menu")).status_code == 403

        await fresh_container.subscriptions.save(SubscriptionWindow(
            tenant_id=tenant["id"],
            status="active",
            end_date=date.today() + timedelta(days=30),
        ))
        menu = await storefront.get("/api/public/menu")
        assert menu.status_code == 200
        assert [c["name"] for c in menu.json()["data"]["categories"]] == ["Pasta", "Desserts"]
        assert TenantId(tenant["id"]) in fresh_container.pools

        deleted = await admin.delete(f"/admin/tenants/{tenant['id']}")
        assert deleted.json()["data"]["namespace_dropped"] is True
        assert "menu_tenant_pasta_house" not in namespace_store.namespaces
        assert pool_factory.pools[0].closed
        assert len(fresh_container.pools) == 0

        assert (await storefront.get("/api/restaurant")).status_code == 404

    @pytest.mark.asyncio
    async def test_recreated_tenant_lands_in_same_namespace(self, clients):
        admin, _ = clients

        first = await admin.post("/admin/tenants", json={"name": "Pasta House"})
        await admin.delete(f"/admin/tenants/{first.json()['data']['tenant']['id']}")
        second = await admin.post("/admin/tenants", json={"name": "Pasta House"})

        assert second.json()["data"]["namespace"] == first.json()["data"]["namespace"]
        assert second.json()["data"]["tenant"]["id"] != first.json()["data"]["tenant"]["id"]

    @pytest.mark.asyncio
    async def test_shutdown_closes_pools(self, clients, fresh_container, pool_factory):
        admin, storefront = clients
        created = await admin.post("/admin/tenants", json={"name": "Pasta House"})
        await fresh_container.subscriptions.save(SubscriptionWindow(
            tenant_id=created.json()["data"]["tenant"]["id"], status="active"
        ))
        await storefront.get("/api/public/menu")

        await fresh_container.shutdown()

        assert all(pool.closed for pool in pool_factory.pools)
        assert fresh_container.pools.is_closed
