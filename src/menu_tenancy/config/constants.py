"""Constants and enums for menu-tenancy.

Values shared by the resolver, the provisioner and the request gate.
"""

from enum import Enum
from typing import Final


class NamespaceLimits:
    """Limits applied when deriving a tenant's storage namespace name."""

    DEFAULT_PREFIX: Final[str] = "menu_tenant_"
    MAX_SLUG_PART_LENGTH: Final[int] = 48
    # PostgreSQL NAMEDATALEN - 1
    MAX_IDENTIFIER_LENGTH: Final[int] = 63


class RateLimitDefaults:
    """Default rate limit configuration."""

    WINDOW_SECONDS: Final[int] = 60
    MAX_REQUESTS: Final[int] = 120
    SWEEP_INTERVAL_SECONDS: Final[int] = 300


class RateLimitKeys:
    """Rate limit key patterns."""

    TENANT: Final[str] = "tenant:{tenant_id}"
    HOST: Final[str] = "host:{host}"
    REDIS_PREFIX: Final[str] = "rate_limit:"


class ResolutionSource(str, Enum):
    """Which resolution rule produced a tenant slug."""

    ROOT_DOMAIN = "root_domain"
    DEV_SUFFIX = "dev_suffix"
    CUSTOM_DOMAIN = "custom_domain"
    EXPLICIT = "explicit"
    REFERER = "referer"
    DEFAULT = "default"


class SubscriptionStatus(str, Enum):
    """Subscription status values stored by the billing collaborator."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"


SUBSCRIPTION_INACTIVE_MESSAGE: Final[str] = (
    "This menu is unavailable. Please contact the restaurant."
)
