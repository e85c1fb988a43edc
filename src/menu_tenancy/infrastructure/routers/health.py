"""Health endpoints."""

import logging

from fastapi import APIRouter, Depends

from ..fastapi.container import TenancyContainer
from ..fastapi.dependencies import get_container
from ...__version__ import __version__
from ...features.database.utils import queries

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(container: TenancyContainer = Depends(get_container)):
    """Basic health check endpoint."""
    platform_database = "not_configured"
    if container.platform_database is not None:
        try:
            await container.platform_database.fetchval(queries.BASIC_HEALTH_CHECK)
            platform_database = "healthy"
        except Exception as e:
            logger.warning(f"Platform database health check failed: {e}")
            platform_database = "unhealthy"

    return {
        "status": "degraded" if platform_database == "unhealthy" else "healthy",
        "service": container.settings.app_name,
        "version": __version__,
        "environment": container.settings.environment,
        "platform_database": platform_database,
        "tenant_pools": len(container.pools),
    }
