"""Per-request gate: rate limit first, then subscription."""

from typing import Optional

from .rate_limiter import RateLimitDecision, RateLimiter
from .subscription_gate import SubscriptionGate
from ...core.value_objects import TenantId


class RequestGate:
    """Admits or rejects one tenant request.

    The rate limit is checked before the subscription so rejected floods
    never reach the subscription store.
    """

    def __init__(self, rate_limiter: RateLimiter, subscription_gate: SubscriptionGate):
        self.rate_limiter = rate_limiter
        self.subscription_gate = subscription_gate

    async def check(self, tenant_id: Optional[TenantId], host: Optional[str] = None) -> RateLimitDecision:
        """Raises RateLimited or SubscriptionInactive when the request is refused."""
        decision = await self.rate_limiter.check(RateLimiter.key_for(tenant_id, host))
        if tenant_id:
            await self.subscription_gate.check(tenant_id)
        return decision
