"""Configuration for menu-tenancy."""

from .constants import (
    NamespaceLimits,
    RateLimitDefaults,
    RateLimitKeys,
    ResolutionSource,
    SubscriptionStatus,
    SUBSCRIPTION_INACTIVE_MESSAGE,
)
from .logging_config import LoggingConfig, setup_logging, get_logger
from .settings import TenancySettings, get_settings

__all__ = [
    "NamespaceLimits",
    "RateLimitDefaults",
    "RateLimitKeys",
    "ResolutionSource",
    "SubscriptionStatus",
    "SUBSCRIPTION_INACTIVE_MESSAGE",
    "LoggingConfig",
    "setup_logging",
    "get_logger",
    "TenancySettings",
    "get_settings",
]
