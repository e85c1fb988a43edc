"""Request gate feature: rate limiting and subscription checks."""

from .rate_limiter import (
    InMemoryRateLimitStore,
    RateLimitDecision,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)
from .subscription_gate import SubscriptionGate
from .request_gate import RequestGate

__all__ = [
    "InMemoryRateLimitStore",
    "RateLimitDecision",
    "RateLimiter",
    "RateLimitStore",
    "RedisRateLimitStore",
    "SubscriptionGate",
    "RequestGate",
]
