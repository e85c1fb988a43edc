"""HTTP middleware."""

from .tenant_middleware import TenantContextMiddleware

__all__ = ["TenantContextMiddleware"]
