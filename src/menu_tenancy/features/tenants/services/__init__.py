"""Tenant services."""

from .domain_map import DomainMap
from .tenant_resolver import TenantResolver, normalize_host
from .tenant_lifecycle import TenantLifecycleService

__all__ = ["DomainMap", "TenantResolver", "normalize_host", "TenantLifecycleService"]
