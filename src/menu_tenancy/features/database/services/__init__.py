"""Database services."""

from .platform_database import PlatformDatabase
from .provisioner import TenantProvisioner, DeprovisionResult

__all__ = ["PlatformDatabase", "TenantProvisioner", "DeprovisionResult"]
