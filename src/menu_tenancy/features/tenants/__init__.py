"""Tenants feature for menu-tenancy.

- entities/: Tenant, ResolvedTenant, SubscriptionWindow and repository protocols
- repositories/: in-memory and platform database repositories
- services/: resolver, custom domain map and tenant lifecycle
- utils/: slug rules
"""

from .entities import (
    Tenant,
    ResolvedTenant,
    SubscriptionWindow,
    TenantRepository,
    SubscriptionRepository,
)

__all__ = [
    "Tenant",
    "ResolvedTenant",
    "SubscriptionWindow",
    "TenantRepository",
    "SubscriptionRepository",
]
