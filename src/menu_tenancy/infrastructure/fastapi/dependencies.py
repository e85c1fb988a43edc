"""FastAPI dependencies for tenant-scoped and admin routes."""

from typing import Any, AsyncIterator

from fastapi import Depends, Request

from .container import TenancyContainer
from ...core.exceptions import AdminHostRequired, ConnectionPoolError, TenantNotResolved
from ...features.database.entities.protocols import ConnectionPool
from ...features.tenants.entities.tenant import ResolvedTenant
from ...features.tenants.services.tenant_resolver import normalize_host


def get_container(request: Request) -> TenancyContainer:
    """Get the application's service container from app state."""
    return request.app.state.container


def get_resolved_tenant(request: Request) -> ResolvedTenant:
    tenant = getattr(request.state, "tenant", None)
    if tenant is None:
        raise TenantNotResolved(request.headers.get("host"))
    return tenant


def get_tenant_pool(request: Request) -> ConnectionPool:
    pool = getattr(request.state, "tenant_pool", None)
    if pool is None:
        raise ConnectionPoolError("No tenant pool attached to this request")
    return pool


async def get_tenant_connection(pool: ConnectionPool = Depends(get_tenant_pool)) -> AsyncIterator[Any]:
    """Yield a pooled connection to the resolved tenant's database."""
    async with pool.connection() as conn:
        yield conn


def require_admin_host(request: Request, container: TenancyContainer = Depends(get_container)) -> None:
    """Reject admin calls on any host but ADMIN_HOST, when one is configured."""
    admin_host = container.settings.admin_host
    if not admin_host:
        return
    host = normalize_host(request.headers.get("host"))
    if host != normalize_host(admin_host):
        raise AdminHostRequired(host)
