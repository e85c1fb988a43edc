"""HTTP routers."""

from .admin import router as admin_router
from .health import router as health_router
from .public import router as public_router

__all__ = ["admin_router", "health_router", "public_router"]
