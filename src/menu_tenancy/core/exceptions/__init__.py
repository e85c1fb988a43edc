"""Exception hierarchy for menu-tenancy."""

from .base import MenuTenancyError, get_http_status_code, create_error_response
from .database import (
    DatabaseError,
    ConnectionPoolError,
    DatabaseConfigurationError,
    InvalidConnectionDescriptorError,
    NamespaceError,
    InvalidNamespaceError,
    RegistryError,
    EncryptionError,
)
from .tenancy import (
    TenantError,
    TenantNotResolved,
    TenantNotFound,
    TenantUnconfigured,
    DuplicateTenantError,
    ProvisioningFailed,
    GateError,
    RateLimited,
    SubscriptionInactive,
    AdminHostRequired,
)

__all__ = [
    "MenuTenancyError",
    "get_http_status_code",
    "create_error_response",
    "DatabaseError",
    "ConnectionPoolError",
    "DatabaseConfigurationError",
    "InvalidConnectionDescriptorError",
    "NamespaceError",
    "InvalidNamespaceError",
    "RegistryError",
    "EncryptionError",
    "TenantError",
    "TenantNotResolved",
    "TenantNotFound",
    "TenantUnconfigured",
    "DuplicateTenantError",
    "ProvisioningFailed",
    "GateError",
    "RateLimited",
    "SubscriptionInactive",
    "AdminHostRequired",
]
