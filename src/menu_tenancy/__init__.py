"""menu-tenancy - multi-tenant core for restaurant menu SaaS.

Resolves the restaurant behind each request, keeps one connection pool per
restaurant database, provisions and tears down those databases, and gates
public requests on rate limits and subscriptions.
"""

from .__version__ import __version__
from .config import TenancySettings, get_settings, setup_logging
from .core.exceptions import MenuTenancyError
from .core.value_objects import TenantId

__all__ = [
    "__version__",
    "TenancySettings",
    "get_settings",
    "setup_logging",
    "MenuTenancyError",
    "TenantId",
]
