"""Tests for the tenant lifecycle service."""

import pytest

from menu_tenancy.core.exceptions import (
    InvalidConnectionDescriptorError,
    ProvisioningFailed,
    TenantNotFound,
)
from menu_tenancy.core.value_objects import TenantId
from menu_tenancy.features.database.repositories.connection_manager import ConnectionPoolManager
from menu_tenancy.features.database.services.provisioner import TenantProvisioner
from menu_tenancy.features.tenants.services.tenant_lifecycle import TenantLifecycleService


@pytest.fixture
def pools(registry, pool_factory):
    return ConnectionPoolManager(registry, pool_factory)


@pytest.fixture
def provisioner(namespace_store, registry, admin_descriptor):
    return TenantProvisioner(namespace_store, registry, admin_descriptor)


@pytest.fixture
def lifecycle(tenant_repository, provisioner, registry, pools):
    return TenantLifecycleService(tenant_repository, provisioner, registry, pools)


class TestCreateTenant:

    @pytest.mark.asyncio
    async def test_create_slugifies_and_provisions(self, lifecycle, namespace_store, registry):
        tenant, descriptor = await lifecycle.create_tenant("Burger Barn!!")

        assert tenant.slug == "burger-barn"
        assert descriptor.namespace == "menu_tenant_burger_barn"
        assert "menu_tenant_burger_barn" in namespace_store.namespaces
        config = await registry.get(tenant.id)
        assert config.descriptor == descriptor

    @pytest.mark.asyncio
    async def test_create_makes_slug_unique(self, lifecycle):
        tenant, descriptor = await lifecycle.create_tenant("Pasta House")

        assert tenant.slug == "pasta-house-2"
        assert descriptor.namespace == "menu_tenant_pasta_house_2"

    @pytest.mark.asyncio
    async def test_explicit_slug_is_slugified(self, lifecycle):
        tenant, _ = await lifecycle.create_tenant("Whatever", slug="Taco Town")

        assert tenant.slug == "taco-town"

    @pytest.mark.asyncio
    async def test_provisioning_failure_removes_tenant(self, lifecycle, namespace_store, tenant_repository, registry):
        namespace_store.fail_on["bootstrap_schema"] = RuntimeError("disk full")

        with pytest.raises(ProvisioningFailed) as exc_info:
            await lifecycle.create_tenant("Burger Barn")

        assert exc_info.value.step == "bootstrap_schema"
        assert not await tenant_repository.slug_exists("burger-barn")
        assert len(registry) == 1  # only the seeded pasta-house entry

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, lifecycle):
        with pytest.raises(ValueError):
            await lifecycle.create_tenant("   ")


class TestDeleteTenant:

    @pytest.mark.asyncio
    async def test_delete_tears_everything_down(self, lifecycle, pools, pool_factory, registry,
                                                tenant_repository, namespace_store):
        namespace_store.namespaces.add("menu_tenant_pasta_house")
        await pools.get(TenantId("1"))

        result = await lifecycle.delete_tenant("1")

        assert result.ok is True
        assert result.dropped is True
        assert result.namespace == "menu_tenant_pasta_house"
        assert "1" not in pools
        assert pool_factory.pools[0].closed
        assert await registry.get(TenantId("1")) is None
        assert await tenant_repository.find_by_id(TenantId("1")) is None

    @pytest.mark.asyncio
    async def test_delete_evicts_pool_rebuilt_during_drop(self, lifecycle, pools, provisioner, pool_factory,
                                                          registry, mocker):
        drop = provisioner.deprovision

        async def request_arrives_during_drop(tenant):
            await pools.get(tenant.id)
            return await drop(tenant)

        mocker.patch.object(provisioner, "deprovision", side_effect=request_arrives_during_drop)

        await lifecycle.delete_tenant("1")

        assert "1" not in pools
        assert len(pool_factory.pools) == 1
        assert pool_factory.pools[0].closed
        assert await registry.get(TenantId("1")) is None

    @pytest.mark.asyncio
    async def test_delete_continues_when_drop_fails(self, lifecycle, namespace_store, tenant_repository):
        namespace_store.fail_on["drop_namespace"] = RuntimeError("permission denied")

        result = await lifecycle.delete_tenant("1")

        assert result.ok is False
        assert any("permission denied" in warning for warning in result.warnings)
        assert await tenant_repository.find_by_id(TenantId("1")) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_tenant(self, lifecycle):
        with pytest.raises(TenantNotFound):
            await lifecycle.delete_tenant("999")


class TestSetDatabaseConfig:

    @pytest.mark.asyncio
    async def test_set_config_evicts_cached_pool(self, lifecycle, pools, pool_factory):
        old_pool = await pools.get(TenantId("1"))

        config = await lifecycle.set_database_config(
            "1", "postgresql://menu:pw@replica.internal:6432/menu_tenant_pasta_house"
        )
        new_pool = await pools.get(TenantId("1"))

        assert config.descriptor.host == "replica.internal"
        assert old_pool.closed
        assert new_pool is not old_pool
        assert new_pool.descriptor.port == 6432

    @pytest.mark.asyncio
    async def test_set_config_rejects_bad_descriptor(self, lifecycle):
        with pytest.raises(InvalidConnectionDescriptorError):
            await lifecycle.set_database_config("1", "not a url")

    @pytest.mark.asyncio
    async def test_set_config_unknown_tenant(self, lifecycle):
        with pytest.raises(TenantNotFound):
            await lifecycle.set_database_config("42", "postgresql://u:p@h:5432/db")
