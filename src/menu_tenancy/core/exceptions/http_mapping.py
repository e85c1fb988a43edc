"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .base import MenuTenancyError
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


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    TenantNotResolved: 400,
    InvalidNamespaceError: 400,
    InvalidConnectionDescriptorError: 400,

    # 403 Forbidden
    SubscriptionInactive: 403,
    AdminHostRequired: 403,
    GateError: 403,

    # 404 Not Found
    TenantNotFound: 404,

    # 409 Conflict
    DuplicateTenantError: 409,

    # 429 Too Many Requests
    RateLimited: 429,

    # 500 Internal Server Error
    DatabaseError: 500,
    ConnectionPoolError: 500,
    DatabaseConfigurationError: 500,
    NamespaceError: 500,
    RegistryError: 500,
    EncryptionError: 500,
    TenantError: 500,

    # 502 Bad Gateway
    ProvisioningFailed: 502,

    # 503 Service Unavailable
    TenantUnconfigured: 503,

    # Default for MenuTenancyError
    MenuTenancyError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, walking its MRO.

    The most specific mapped class wins, so subclasses do not need their
    own entry.
    """
    for cls in type(exception).__mro__:
        if cls in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[cls]
    return 500
