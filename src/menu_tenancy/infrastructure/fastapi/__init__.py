"""FastAPI application wiring."""

from .container import TenancyContainer, build_container
from .dependencies import (
    get_container,
    get_resolved_tenant,
    get_tenant_connection,
    get_tenant_pool,
    require_admin_host,
)

__all__ = [
    "TenancyContainer",
    "build_container",
    "get_container",
    "get_resolved_tenant",
    "get_tenant_connection",
    "get_tenant_pool",
    "require_admin_host",
]
