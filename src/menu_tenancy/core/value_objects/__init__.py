"""Value objects for menu-tenancy."""

from .identifiers import TenantId

__all__ = ["TenantId"]
