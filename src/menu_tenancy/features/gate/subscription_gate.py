"""Subscription validity check."""

import logging
from datetime import date
from typing import Callable

from ..tenants.entities.protocols import SubscriptionRepository
from ..tenants.entities.tenant import SubscriptionWindow
from ...core.exceptions import SubscriptionInactive
from ...core.value_objects import TenantId

logger = logging.getLogger(__name__)


class SubscriptionGate:
    """Passes a tenant when any of its subscription windows is active today.

    Windows are read on every call, so a renewal takes effect on the next
    request.
    """

    def __init__(self, subscriptions: SubscriptionRepository, today: Callable[[], date] = date.today):
        self._subscriptions = subscriptions
        self._today = today

    async def check(self, tenant_id: TenantId) -> SubscriptionWindow:
        """Return the active window.

        Raises:
            SubscriptionInactive: If no window is active
        """
        today = self._today()
        for window in await self._subscriptions.find_by_tenant(TenantId.of(tenant_id)):
            if window.is_active(today):
                return window

        logger.info(f"Tenant {tenant_id} has no active subscription")
        raise SubscriptionInactive(str(tenant_id))
