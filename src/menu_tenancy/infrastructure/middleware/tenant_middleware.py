"""Tenant context middleware.

For tenant-scoped paths the middleware resolves the tenant from the request,
attaches its connection pool and runs the request gate before the route
handler sees the request. Failures are rendered directly as JSON error
responses; exceptions raised inside BaseHTTPMiddleware would bypass the
application's exception handlers.
"""

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ...api.exception_handlers import error_response, unexpected_error_response
from ...core.exceptions import MenuTenancyError

if TYPE_CHECKING:
    from ..fastapi.container import TenancyContainer

logger = logging.getLogger(__name__)

DEFAULT_TENANT_PREFIXES = ("/api/",)
DEFAULT_EXEMPT_PATHS: Sequence[str] = ()
# Only the tenant is resolved on these paths; no pool and no gate
DEFAULT_RESOLVE_ONLY_PATHS = ("/api/restaurant",)


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Resolves tenant context and gates tenant requests."""

    def __init__(
        self,
        app,
        container_getter: Callable[[], "TenancyContainer"],
        tenant_prefixes: Sequence[str] = DEFAULT_TENANT_PREFIXES,
        exempt_paths: Optional[Sequence[str]] = None,
        resolve_only_paths: Optional[Sequence[str]] = None,
        is_production: bool = True,
    ):
        super().__init__(app)
        self._container_getter = container_getter
        self.tenant_prefixes = tuple(tenant_prefixes)
        self.exempt_paths = tuple(exempt_paths if exempt_paths is not None else DEFAULT_EXEMPT_PATHS)
        self.resolve_only_paths = tuple(
            resolve_only_paths if resolve_only_paths is not None else DEFAULT_RESOLVE_ONLY_PATHS
        )
        self.is_production = is_production

    def _is_tenant_path(self, path: str) -> bool:
        if any(path == p or path.startswith(p + "/") for p in self.exempt_paths):
            return False
        return any(path.startswith(prefix) for prefix in self.tenant_prefixes)

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process tenant context for incoming requests."""
        request.state.tenant = None
        request.state.tenant_pool = None

        path = request.url.path
        if not self._is_tenant_path(path):
            return await call_next(request)

        container = self._container_getter()
        host = request.headers.get("host")
        try:
            tenant = await container.resolver.resolve(
                host,
                forwarded_host=request.headers.get("x-forwarded-host"),
                referer=request.headers.get("referer"),
                explicit_slug=request.query_params.get("slug"),
            )
            request.state.tenant = tenant

            if path not in self.resolve_only_paths:
                request.state.tenant_pool = await container.pools.get(tenant.tenant_id)
                decision = await container.gate.check(tenant.tenant_id, host)
                request.state.rate_limit = decision

        except MenuTenancyError as e:
            logger.warning(f"Tenant request refused on {path} (host={host}): {e.message}")
            return error_response(e)
        except Exception as e:
            logger.error(f"Tenant middleware error on {path}: {e}", exc_info=True)
            return unexpected_error_response(e, self.is_production)

        logger.debug(
            f"Tenant context configured: tenant_id={tenant.tenant_id}, "
            f"slug={tenant.slug}, source={tenant.source.value}, path={path}"
        )
        return await call_next(request)
