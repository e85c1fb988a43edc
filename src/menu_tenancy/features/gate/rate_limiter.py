"""Sliding-window request rate limiting per tenant (or per host).

Each key may make at most `max_requests` accepted requests within any
`window_seconds` interval. Rejected requests are not recorded, so a client
that keeps retrying does not extend its own lockout.
"""

import logging
import math
import time
import uuid
from abc import abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Optional, Protocol, runtime_checkable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from ...config.constants import RateLimitDefaults, RateLimitKeys
from ...core.exceptions import RateLimited

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one rate limit check."""

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int = 0


def _retry_after(oldest: float, now: float, window_seconds: int) -> int:
    return max(1, math.ceil(oldest + window_seconds - now))


@runtime_checkable
class RateLimitStore(Protocol):
    """Protocol for the storage behind the sliding window."""

    @abstractmethod
    async def record(self, key: str, now: float, window_seconds: int, max_requests: int) -> RateLimitDecision:
        """Prune the key's window, then record `now` if under the cap."""
        ...


class InMemoryRateLimitStore(RateLimitStore):
    """Per-process store: one timestamp deque per key."""

    def __init__(self):
        self._buckets: Dict[str, Deque[float]] = {}

    async def record(self, key: str, now: float, window_seconds: int, max_requests: int) -> RateLimitDecision:
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = deque()

        cutoff = now - window_seconds
        while bucket and bucket[0] < cutoff:
            bucket.popleft()

        if len(bucket) >= max_requests:
            return RateLimitDecision(
                allowed=False,
                limit=max_requests,
                remaining=0,
                retry_after_seconds=_retry_after(bucket[0], now, window_seconds),
            )

        bucket.append(now)
        return RateLimitDecision(allowed=True, limit=max_requests, remaining=max_requests - len(bucket))

    async def sweep(self, now: float, window_seconds: int) -> int:
        """Drop keys with no timestamp inside the window; returns how many."""
        cutoff = now - window_seconds
        stale = [key for key, bucket in self._buckets.items() if not bucket or bucket[-1] < cutoff]
        for key in stale:
            del self._buckets[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._buckets)


class RedisRateLimitStore(RateLimitStore):
    """Sorted-set sliding window shared by every process using the same Redis.

    Each accepted request is a member scored by its timestamp. Keys expire
    one window after their last write. When Redis is unavailable the check
    falls back to an in-process store.
    """

    def __init__(
        self,
        client: Redis,
        prefix: str = RateLimitKeys.REDIS_PREFIX,
        fallback: Optional[InMemoryRateLimitStore] = None,
    ):
        self._redis = client
        self._prefix = prefix
        self._fallback = fallback if fallback is not None else InMemoryRateLimitStore()

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisRateLimitStore":
        return cls(Redis.from_url(url), **kwargs)

    async def record(self, key: str, now: float, window_seconds: int, max_requests: int) -> RateLimitDecision:
        redis_key = f"{self._prefix}{key}"
        member = f"{now:.6f}:{uuid.uuid4().hex}"
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.zremrangebyscore(redis_key, 0, f"({now - window_seconds}")
                pipe.zadd(redis_key, {member: now})
                pipe.zcard(redis_key)
                pipe.expire(redis_key, window_seconds)
                _, _, count, _ = await pipe.execute()

            if count <= max_requests:
                return RateLimitDecision(allowed=True, limit=max_requests, remaining=max_requests - count)

            # Over the cap: take this request back out of the window
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.zrem(redis_key, member)
                pipe.zrange(redis_key, 0, 0, withscores=True)
                _, oldest = await pipe.execute()
        except RedisError as e:
            logger.warning(f"Redis rate limit check failed for {key}, using local window: {e}")
            return await self._fallback.record(key, now, window_seconds, max_requests)

        oldest_score = oldest[0][1] if oldest else now
        return RateLimitDecision(
            allowed=False,
            limit=max_requests,
            remaining=0,
            retry_after_seconds=_retry_after(oldest_score, now, window_seconds),
        )

    async def sweep(self, now: float, window_seconds: int) -> int:
        # Redis keys expire on their own; only the fallback needs pruning
        return await self._fallback.sweep(now, window_seconds)

    async def close(self) -> None:
        await self._redis.aclose()


class RateLimiter:
    """Applies the sliding window to a key and raises when it is exceeded."""

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        window_seconds: int = RateLimitDefaults.WINDOW_SECONDS,
        max_requests: int = RateLimitDefaults.MAX_REQUESTS,
        clock: Callable[[], float] = time.time,
    ):
        if window_seconds <= 0 or max_requests <= 0:
            raise ValueError("window_seconds and max_requests must be > 0")
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock

    @staticmethod
    def key_for(tenant_id: Optional[object] = None, host: Optional[str] = None) -> str:
        """`tenant:<id>` when a tenant is known, otherwise `host:<host>`."""
        if tenant_id:
            return RateLimitKeys.TENANT.format(tenant_id=tenant_id)
        return RateLimitKeys.HOST.format(host=(host or "").lower())

    async def check(self, key: str) -> RateLimitDecision:
        """Record one request for `key`.

        Raises:
            RateLimited: If the key already has `max_requests` requests in the window
        """
        decision = await self.store.record(key, self._clock(), self.window_seconds, self.max_requests)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded: key={key}, retry_after={decision.retry_after_seconds}s")
            raise RateLimited(key, decision.limit, self.window_seconds, decision.retry_after_seconds)
        return decision

    async def sweep(self) -> int:
        """Forget idle keys so memory stays bounded by active keys."""
        sweep = getattr(self.store, "sweep", None)
        if sweep is None:
            return 0
        removed = await sweep(self._clock(), self.window_seconds)
        if removed:
            logger.debug(f"Swept {removed} idle rate limit keys")
        return removed
