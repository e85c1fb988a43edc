"""API helpers shared by the FastAPI application."""

from .exception_handlers import (
    ExceptionHandlerRegistry,
    error_response,
    register_exception_handlers,
    unexpected_error_response,
)

__all__ = [
    "ExceptionHandlerRegistry",
    "error_response",
    "register_exception_handlers",
    "unexpected_error_response",
]
