"""Tenant domain entities.

A tenant is a restaurant with its own isolated catalog database. Subscription
windows belong to the billing collaborator and are only read here.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from ....core.value_objects import TenantId
from ....config.constants import ResolutionSource, SubscriptionStatus


@dataclass
class Tenant:
    """Tenant domain entity.

    Matches the platform `tenants` table: immutable id, unique URL-safe slug.
    """

    id: TenantId
    slug: str
    name: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        from ..utils.validation import TenantValidationRules

        self.id = TenantId.of(self.id)
        TenantValidationRules.validate_slug(self.slug)
        if not self.name or not self.name.strip():
            raise ValueError("Tenant name cannot be empty")


@dataclass(frozen=True)
class ResolvedTenant:
    """Outcome of resolving an inbound request to a tenant."""

    tenant_id: TenantId
    slug: str
    source: ResolutionSource


@dataclass
class SubscriptionWindow:
    """A tenant's subscription period as recorded by billing."""

    tenant_id: TenantId
    status: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    package_type: Optional[str] = None

    def __post_init__(self):
        self.tenant_id = TenantId.of(self.tenant_id)

    def is_active(self, today: Optional[date] = None) -> bool:
        """Active iff status is active and the window has not ended."""
        if self.status != SubscriptionStatus.ACTIVE.value:
            return False
        if self.end_date is None:
            return True
        today = today or date.today()
        return self.end_date >= today
