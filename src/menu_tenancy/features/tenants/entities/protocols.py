"""Protocols for the collaborators that own tenant and subscription data."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ....core.value_objects import TenantId
from .tenant import Tenant, SubscriptionWindow


@runtime_checkable
class TenantRepository(Protocol):
    """Tenant lookups (and the writes the lifecycle service needs)."""

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[Tenant]:
        """Find tenant by slug."""
        ...

    @abstractmethod
    async def find_by_id(self, tenant_id: TenantId) -> Optional[Tenant]:
        """Find tenant by ID."""
        ...

    @abstractmethod
    async def slug_exists(self, slug: str) -> bool:
        """Check whether a slug is taken."""
        ...

    @abstractmethod
    async def save(self, name: str, slug: str) -> Tenant:
        """Create a tenant and return it with its assigned id."""
        ...

    @abstractmethod
    async def delete(self, tenant_id: TenantId) -> bool:
        """Delete a tenant; returns False when it did not exist."""
        ...


@runtime_checkable
class SubscriptionRepository(Protocol):
    """Subscription window lookups owned by the billing layer."""

    @abstractmethod
    async def find_by_tenant(self, tenant_id: TenantId) -> List[SubscriptionWindow]:
        """Return the tenant's subscription windows, newest first."""
        ...

    @abstractmethod
    async def save(self, window: SubscriptionWindow) -> SubscriptionWindow:
        """Record a subscription window."""
        ...
