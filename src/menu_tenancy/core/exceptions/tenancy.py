"""Tenant resolution, provisioning and gate exceptions."""

from typing import Optional

from .base import MenuTenancyError
from ...config.constants import SUBSCRIPTION_INACTIVE_MESSAGE


class TenantError(MenuTenancyError):
    """Base class for tenant-related errors."""
    pass


class TenantNotResolved(TenantError):
    """Raised when no tenant slug can be derived from the request."""

    def __init__(self, host: Optional[str] = None):
        self.host = host
        super().__init__(
            "Tenant not resolved from host",
            details={"host": host} if host else {}
        )


class TenantNotFound(TenantError):
    """Raised when a slug or id was derived but no such tenant exists."""

    def __init__(self, identifier: str, field: str = "slug"):
        self.identifier = identifier
        self.field = field
        super().__init__(
            "Restaurant not found",
            details={field: identifier}
        )


class TenantUnconfigured(TenantError):
    """Raised when a tenant exists but has no database configuration."""

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(
            "Tenant DB is not configured for this restaurant",
            details={"tenant_id": tenant_id}
        )


class DuplicateTenantError(TenantError):
    """Raised when a tenant slug is already taken."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Tenant slug '{slug}' already exists", details={"slug": slug})


class ProvisioningFailed(TenantError):
    """Raised when a provisioning step fails before the registry commit."""

    def __init__(self, tenant_id: str, step: str, reason: str):
        self.tenant_id = tenant_id
        self.step = step
        self.reason = reason
        super().__init__(
            f"Tenant provisioning failed at '{step}': {reason}",
            details={"tenant_id": tenant_id, "step": step}
        )


class GateError(MenuTenancyError):
    """Base class for request gate denials."""
    pass


class RateLimited(GateError):
    """Raised when a key exceeds its request cap within the window."""

    def __init__(self, key: str, limit: int, window_seconds: int, retry_after_seconds: int):
        self.key = key
        self.limit = limit
        self.window_seconds = window_seconds
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            "Too many requests",
            details={
                "limit": limit,
                "window_seconds": window_seconds,
                "retry_after_seconds": retry_after_seconds,
            }
        )


class SubscriptionInactive(GateError):
    """Raised when the tenant has no active subscription window."""

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(SUBSCRIPTION_INACTIVE_MESSAGE, details={"tenant_id": tenant_id})


class AdminHostRequired(MenuTenancyError):
    """Raised when an admin route is called on the wrong host."""

    def __init__(self, host: str):
        self.host = host
        super().__init__("Forbidden: wrong host for super admin", details={"host": host})
