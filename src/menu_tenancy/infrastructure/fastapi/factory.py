"""FastAPI application factory for the menu tenancy service."""

import asyncio
import logging
import re
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .container import TenancyContainer, build_container
from ..middleware.tenant_middleware import TenantContextMiddleware
from ..routers import admin_router, health_router, public_router
from ...__version__ import __version__
from ...api.exception_handlers import register_exception_handlers
from ...config.settings import TenancySettings, get_settings

logger = logging.getLogger(__name__)


async def _sweep_rate_limits(container: TenancyContainer, interval: float) -> None:
    """Periodically drop idle rate limit keys."""
    while True:
        await asyncio.sleep(interval)
        try:
            await container.rate_limiter.sweep()
        except Exception as e:
            logger.warning(f"Rate limit sweep failed: {e}")


def _create_lifespan(container: TenancyContainer):
    """Create lifespan context manager."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = container.settings
        logger.info(f"Starting {settings.app_name} ({settings.environment})")
        await container.startup()

        sweeper = asyncio.create_task(
            _sweep_rate_limits(container, settings.rate_limit_sweep_interval_seconds)
        )
        try:
            yield
        finally:
            logger.info(f"Shutting down {settings.app_name}")
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass
            await container.shutdown()

    return lifespan


def _add_cors(app: FastAPI, settings: TenancySettings) -> None:
    origins = settings.get_cors_origins()
    origin_regex = None
    if settings.root_domain:
        # Subdomains of the root domain are tenant storefronts
        origin_regex = rf"https?://([a-z0-9-]+\.)*{re.escape(settings.root_domain)}(:\d+)?"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=origin_regex,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(
    settings: Optional[TenancySettings] = None,
    container: Optional[TenancyContainer] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        container: Pre-wired container, mostly for tests

    Returns:
        Configured FastAPI application
    """
    settings = settings or (container.settings if container is not None else get_settings())
    container = container if container is not None else build_container(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_create_lifespan(container),
    )
    app.state.container = container
    app.state.settings = settings

    register_exception_handlers(app, is_production=settings.is_production)

    # Added before CORS so CORS wraps tenant error responses too
    app.add_middleware(
        TenantContextMiddleware,
        container_getter=lambda: app.state.container,
        is_production=settings.is_production,
    )
    _add_cors(app, settings)

    app.include_router(health_router)
    app.include_router(public_router)
    app.include_router(admin_router)

    logger.info(f"Created {settings.app_name} FastAPI application")
    return app
