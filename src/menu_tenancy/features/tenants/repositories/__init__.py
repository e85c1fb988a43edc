"""Tenant repositories."""

from .memory import InMemoryTenantRepository, InMemorySubscriptionRepository
from .postgres import PostgresTenantRepository, PostgresSubscriptionRepository

__all__ = [
    "InMemoryTenantRepository",
    "InMemorySubscriptionRepository",
    "PostgresTenantRepository",
    "PostgresSubscriptionRepository",
]
