"""Tenant identity resolution from inbound request attributes.

Rules are tried in order and the first one producing a slug wins:

1. `<slug>.<root domain>` on the host, then on the forwarded host
2. `<slug>.localhost` (the development suffix) on the same hosts
3. exact custom-domain match in the domain map
4. an explicit slug supplied by the caller (`?slug=`)
5. a `http(s)://<slug>.localhost` referer
6. the configured default slug, if any

Resolution is not cached; every request is resolved afresh.
"""

import logging
import re
from typing import Optional, Tuple

from .domain_map import DomainMap
from ..entities.protocols import TenantRepository
from ..entities.tenant import ResolvedTenant
from ....config.constants import ResolutionSource
from ....config.settings import TenancySettings
from ....core.exceptions import TenantNotFound, TenantNotResolved

logger = logging.getLogger(__name__)

REFERER_PATTERN = re.compile(r'https?://([a-z0-9-]+)\.localhost')


def normalize_host(host: Optional[str]) -> str:
    """Lower-case a Host header value and drop any port."""
    if not host:
        return ""
    # X-Forwarded-Host may carry a proxy chain; the first entry is the client's
    host = host.split(",")[0].strip().lower()
    if host.startswith("["):
        end = host.find("]")
        return host[:end + 1] if end != -1 else host
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit():
        return name
    return host


class TenantResolver:
    """Maps request host, forwarded host, referer and query slug to a tenant."""

    def __init__(
        self,
        tenants: TenantRepository,
        domain_map: Optional[DomainMap] = None,
        root_domain: Optional[str] = None,
        dev_suffix: str = ".localhost",
        default_slug: Optional[str] = None,
    ):
        self._tenants = tenants
        self._domain_map = domain_map if domain_map is not None else DomainMap()
        self._root_domain = (root_domain or "").strip().lower().strip(".")
        self._dev_suffix = (dev_suffix or "").strip().lower()
        self._default_slug = (default_slug or "").strip().lower() or None

    @classmethod
    def from_settings(
        cls,
        settings: TenancySettings,
        tenants: TenantRepository,
        domain_map: Optional[DomainMap] = None,
    ) -> "TenantResolver":
        return cls(
            tenants,
            domain_map=(
                domain_map if domain_map is not None else DomainMap.from_json(settings.tenant_domain_map)
            ),
            root_domain=settings.root_domain,
            dev_suffix=settings.dev_host_suffix,
            default_slug=settings.default_tenant_slug,
        )

    @property
    def domain_map(self) -> DomainMap:
        return self._domain_map

    def _from_root_domain(self, host: str) -> Optional[str]:
        if not self._root_domain or not host.endswith("." + self._root_domain):
            return None
        return host[:-len(self._root_domain)].rstrip(".") or None

    def _from_dev_suffix(self, host: str) -> Optional[str]:
        if not self._dev_suffix:
            return None
        idx = host.find(self._dev_suffix)
        if idx > 0:
            return host[:idx]
        return None

    def derive_slug(
        self,
        host: Optional[str],
        forwarded_host: Optional[str] = None,
        referer: Optional[str] = None,
        explicit_slug: Optional[str] = None,
    ) -> Optional[Tuple[str, ResolutionSource]]:
        """Apply the resolution rules without touching the tenant store."""
        hosts = [h for h in (normalize_host(host), normalize_host(forwarded_host)) if h]

        for h in hosts:
            slug = self._from_root_domain(h)
            if slug:
                return slug, ResolutionSource.ROOT_DOMAIN
            slug = self._from_dev_suffix(h)
            if slug:
                return slug, ResolutionSource.DEV_SUFFIX

        for h in hosts:
            slug = self._domain_map.lookup(h)
            if slug:
                return slug, ResolutionSource.CUSTOM_DOMAIN

        if explicit_slug and explicit_slug.strip():
            return explicit_slug.strip().lower(), ResolutionSource.EXPLICIT

        if referer:
            match = REFERER_PATTERN.search(referer.lower())
            if match:
                return match.group(1), ResolutionSource.REFERER

        if self._default_slug:
            return self._default_slug, ResolutionSource.DEFAULT

        return None

    async def resolve(
        self,
        host: Optional[str],
        forwarded_host: Optional[str] = None,
        referer: Optional[str] = None,
        explicit_slug: Optional[str] = None,
    ) -> ResolvedTenant:
        """Resolve a request to a tenant.

        Raises:
            TenantNotResolved: If no rule yields a slug
            TenantNotFound: If the slug does not name a tenant
        """
        derived = self.derive_slug(host, forwarded_host, referer, explicit_slug)
        if derived is None:
            logger.debug(f"No tenant slug for host={host!r} forwarded={forwarded_host!r}")
            raise TenantNotResolved(normalize_host(host) or None)

        slug, source = derived
        tenant = await self._tenants.find_by_slug(slug)
        if tenant is None:
            logger.debug(f"Slug {slug!r} ({source.value}) does not name a tenant")
            raise TenantNotFound(slug)

        return ResolvedTenant(tenant_id=tenant.id, slug=tenant.slug, source=source)
