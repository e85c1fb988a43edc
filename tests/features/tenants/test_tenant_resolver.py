"""Tests for tenant resolution."""

import pytest

from menu_tenancy.config.constants import ResolutionSource
from menu_tenancy.core.exceptions import TenantNotFound, TenantNotResolved
from menu_tenancy.core.value_objects import TenantId
from menu_tenancy.features.tenants.services.domain_map import DomainMap
from menu_tenancy.features.tenants.services.tenant_resolver import TenantResolver, normalize_host


@pytest.fixture
def resolver(tenant_repository):
    return TenantResolver(
        tenant_repository,
        domain_map=DomainMap({"foodie.com": "pasta-house"}),
        root_domain="menu.example.com",
    )


class TestNormalizeHost:
    """Host header normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("Pasta-House.Menu.Example.com", "pasta-house.menu.example.com"),
        ("pasta-house.localhost:5173", "pasta-house.localhost"),
        ("foodie.com, proxy.internal", "foodie.com"),
        ("[::1]:8080", "[::1]"),
        ("", ""),
        (None, ""),
    ])
    def test_normalize_host(self, raw, expected):
        assert normalize_host(raw) == expected


class TestDeriveSlug:
    """Rule ordering without touching the tenant store."""

    def test_root_domain_subdomain(self, resolver):
        assert resolver.derive_slug("pasta-house.menu.example.com") == (
            "pasta-house", ResolutionSource.ROOT_DOMAIN
        )

    def test_root_domain_requires_label_boundary(self, resolver):
        # "evilmenu.example.com" ends with the root text but is not a subdomain of it
        assert resolver.derive_slug("evilmenu.example.com") is None

    def test_bare_root_domain_yields_nothing(self, resolver):
        assert resolver.derive_slug("menu.example.com") is None

    def test_forwarded_host_used_when_host_has_no_slug(self, resolver):
        assert resolver.derive_slug("127.0.0.1:5000", forwarded_host="pasta-house.menu.example.com") == (
            "pasta-house", ResolutionSource.ROOT_DOMAIN
        )

    def test_dev_suffix(self, resolver):
        assert resolver.derive_slug("pasta-house.localhost:5173") == ("pasta-house", ResolutionSource.DEV_SUFFIX)

    def test_bare_localhost_yields_nothing(self, resolver):
        assert resolver.derive_slug("localhost:5000") is None

    def test_custom_domain(self, resolver):
        assert resolver.derive_slug("FOODIE.com") == ("pasta-house", ResolutionSource.CUSTOM_DOMAIN)

    def test_custom_domain_on_forwarded_host(self, resolver):
        assert resolver.derive_slug("127.0.0.1", forwarded_host="foodie.com") == (
            "pasta-house", ResolutionSource.CUSTOM_DOMAIN
        )

    def test_subdomain_beats_custom_domain(self, tenant_repository):
        resolver = TenantResolver(
            tenant_repository,
            domain_map=DomainMap({"pasta-house.menu.example.com": "other"}),
            root_domain="menu.example.com",
        )
        slug, source = resolver.derive_slug("pasta-house.menu.example.com")
        assert (slug, source) == ("pasta-house", ResolutionSource.ROOT_DOMAIN)

    def test_explicit_slug(self, resolver):
        assert resolver.derive_slug("127.0.0.1", explicit_slug="Pasta-House") == (
            "pasta-house", ResolutionSource.EXPLICIT
        )

    def test_custom_domain_beats_explicit_slug(self, resolver):
        slug, source = resolver.derive_slug("foodie.com", explicit_slug="other")
        assert source == ResolutionSource.CUSTOM_DOMAIN

    def test_referer(self, resolver):
        assert resolver.derive_slug("127.0.0.1", referer="http://pasta-house.localhost:5173/menu") == (
            "pasta-house", ResolutionSource.REFERER
        )

    def test_explicit_slug_beats_referer(self, resolver):
        slug, _ = resolver.derive_slug(
            "127.0.0.1", referer="http://other.localhost/", explicit_slug="pasta-house"
        )
        assert slug == "pasta-house"

    def test_default_slug_is_last_resort(self, tenant_repository):
        resolver = TenantResolver(tenant_repository, default_slug="pasta-house")
        assert resolver.derive_slug("127.0.0.1") == ("pasta-house", ResolutionSource.DEFAULT)

    def test_nothing_matches(self, resolver):
        assert resolver.derive_slug("127.0.0.1") is None

    def test_reload_of_injected_empty_map(self, tenant_repository):
        domain_map = DomainMap()
        resolver = TenantResolver(tenant_repository, domain_map=domain_map)

        domain_map.reload({"foodie.com": "pasta-house"})

        assert resolver.domain_map is domain_map
        assert resolver.derive_slug("foodie.com") == ("pasta-house", ResolutionSource.CUSTOM_DOMAIN)


class TestResolve:
    """Resolution against the tenant repository."""

    @pytest.mark.asyncio
    async def test_resolve_subdomain(self, resolver):
        resolved = await resolver.resolve("pasta-house.menu.example.com")

        assert resolved.tenant_id == TenantId("1")
        assert resolved.slug == "pasta-house"
        assert resolved.source == ResolutionSource.ROOT_DOMAIN

    @pytest.mark.asyncio
    async def test_unresolved_host_raises(self, resolver):
        with pytest.raises(TenantNotResolved) as exc_info:
            await resolver.resolve("127.0.0.1:5000")
        assert exc_info.value.message == "Tenant not resolved from host"

    @pytest.mark.asyncio
    async def test_unknown_slug_raises_not_found(self, resolver):
        with pytest.raises(TenantNotFound) as exc_info:
            await resolver.resolve("burger-barn.menu.example.com")
        assert exc_info.value.identifier == "burger-barn"

    @pytest.mark.asyncio
    async def test_resolution_is_not_cached(self, resolver, tenant_repository):
        await resolver.resolve("pasta-house.menu.example.com")
        await tenant_repository.delete(TenantId("1"))

        with pytest.raises(TenantNotFound):
            await resolver.resolve("pasta-house.menu.example.com")

    @pytest.mark.asyncio
    async def test_from_settings(self, settings, tenant_repository):
        resolver = TenantResolver.from_settings(settings, tenant_repository)

        resolved = await resolver.resolve("foodie.com")
        assert resolved.source == ResolutionSource.CUSTOM_DOMAIN
