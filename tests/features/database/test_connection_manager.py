"""Tests for the per-tenant connection pool manager."""

import asyncio
import logging

import pytest

from menu_tenancy.core.exceptions import ConnectionPoolError, TenantUnconfigured
from menu_tenancy.core.value_objects import TenantId
from menu_tenancy.features.database.repositories.connection_manager import ConnectionPoolManager


@pytest.fixture
def manager(registry, pool_factory):
    return ConnectionPoolManager(registry, pool_factory)


class TestGet:

    @pytest.mark.asyncio
    async def test_same_pool_for_same_tenant(self, manager, pool_factory):
        first = await manager.get(TenantId("1"))
        second = await manager.get("1")

        assert first is second
        assert pool_factory.calls == ["1"]
        assert first.descriptor.namespace == "menu_tenant_pasta_house"

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_build_one_pool(self, manager, pool_factory):
        pools = await asyncio.gather(*[manager.get(TenantId("1")) for _ in range(20)])

        assert len(pool_factory.calls) == 1
        assert all(pool is pools[0] for pool in pools)

    @pytest.mark.asyncio
    async def test_different_tenants_get_different_pools(self, manager, registry, admin_descriptor, pool_factory):
        await registry.upsert(TenantId("2"), admin_descriptor.with_namespace("menu_tenant_cafe"))

        first, second = await asyncio.gather(manager.get("1"), manager.get("2"))

        assert first is not second
        assert sorted(pool_factory.calls) == ["1", "2"]
        assert len(manager) == 2

    @pytest.mark.asyncio
    async def test_unconfigured_tenant(self, manager, pool_factory):
        with pytest.raises(TenantUnconfigured):
            await manager.get(TenantId("42"))

        assert pool_factory.calls == []

    @pytest.mark.asyncio
    async def test_failed_creation_leaves_no_entry(self, manager, pool_factory):
        pool_factory.fail_with = OSError("connection refused")

        with pytest.raises(ConnectionPoolError):
            await manager.get("1")
        assert "1" not in manager

        pool_factory.fail_with = None
        pool = await manager.get("1")
        assert pool.opened
        assert pool_factory.calls == ["1", "1"]


class TestConnection:

    @pytest.mark.asyncio
    async def test_connection_yields_pooled_connection(self, manager, menu_connection):
        async with manager.connection("1") as conn:
            assert conn is menu_connection


class TestEvict:

    @pytest.mark.asyncio
    async def test_evict_closes_and_forgets(self, manager, pool_factory):
        pool = await manager.get("1")

        assert await manager.evict("1") is True
        assert pool.closed
        assert "1" not in manager

        replacement = await manager.get("1")
        assert replacement is not pool

    @pytest.mark.asyncio
    async def test_evict_unknown_tenant(self, manager):
        assert await manager.evict("1") is False


class TestCloseAll:

    @pytest.mark.asyncio
    async def test_close_all_closes_every_pool(self, manager, registry, admin_descriptor, pool_factory):
        await registry.upsert(TenantId("2"), admin_descriptor.with_namespace("menu_tenant_cafe"))
        await manager.get("1")
        await manager.get("2")

        await manager.close_all()

        assert all(pool.closed for pool in pool_factory.pools)
        assert len(manager) == 0
        assert manager.is_closed

    @pytest.mark.asyncio
    async def test_close_errors_are_logged_not_raised(self, manager, registry, admin_descriptor,
                                                      pool_factory, caplog):
        await registry.upsert(TenantId("2"), admin_descriptor.with_namespace("menu_tenant_cafe"))
        pool_factory.close_errors["1"] = RuntimeError("socket gone")
        await manager.get("1")
        await manager.get("2")

        with caplog.at_level(logging.ERROR):
            await manager.close_all()

        assert all(pool.closed for pool in pool_factory.pools)
        assert "socket gone" in caplog.text

    @pytest.mark.asyncio
    async def test_get_after_close_is_rejected(self, manager):
        await manager.close_all()

        with pytest.raises(ConnectionPoolError):
            await manager.get("1")

    @pytest.mark.asyncio
    async def test_pool_built_during_close_is_discarded(self, registry, pool_factory):
        pool_factory.delay = 0.05
        manager = ConnectionPoolManager(registry, pool_factory)

        pending = asyncio.ensure_future(manager.get("1"))
        await asyncio.sleep(0.01)
        await manager.close_all()

        with pytest.raises(ConnectionPoolError):
            await pending
        assert pool_factory.pools[0].closed
        assert len(manager) == 0

    @pytest.mark.asyncio
    async def test_pool_metrics(self, manager):
        await manager.get("1")

        metrics = manager.pool_metrics()

        assert metrics["1"]["namespace"] == "menu_tenant_pasta_house"
