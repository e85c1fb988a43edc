"""
Exception handlers for the menu tenancy FastAPI application.

Every MenuTenancyError is rendered as `{"success": false, "message", "error"}`
with the status code from the exception mapping. The same rendering is used
by the tenant middleware, which cannot rely on FastAPI's handlers.
"""
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import MenuTenancyError, RateLimited, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


def error_response(exc: MenuTenancyError) -> JSONResponse:
    """Build the JSON response for a menu-tenancy exception."""
    headers = None
    if isinstance(exc, RateLimited):
        headers = {
            "Retry-After": str(exc.retry_after_seconds),
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
        }
    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=create_error_response(exc),
        headers=headers,
    )


def unexpected_error_response(exc: Exception, is_production: bool = True) -> JSONResponse:
    message = "An unexpected error occurred" if is_production else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": message, "error": None},
    )


class ExceptionHandlerRegistry:
    """Registers the application's exception handlers."""

    def __init__(self, is_production: bool = True):
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application.

        Args:
            app: FastAPI application instance
        """
        @app.exception_handler(MenuTenancyError)
        async def menu_tenancy_exception_handler(request: Request, exc: MenuTenancyError):
            """Handle menu-tenancy exceptions."""
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.error_code} on {request.url.path}: {exc.message}")
            return error_response(exc)

        @app.exception_handler(ValueError)
        async def value_error_handler(request: Request, exc: ValueError):
            """Handle value errors."""
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"success": False, "message": str(exc), "error": None},
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)
            return unexpected_error_response(exc, self.is_production)


def register_exception_handlers(app: FastAPI, is_production: Optional[bool] = True) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    ExceptionHandlerRegistry(bool(is_production)).register_handlers(app)
