"""Tenant entities and protocols."""

from .tenant import Tenant, ResolvedTenant, SubscriptionWindow
from .protocols import TenantRepository, SubscriptionRepository

__all__ = [
    "Tenant",
    "ResolvedTenant",
    "SubscriptionWindow",
    "TenantRepository",
    "SubscriptionRepository",
]
