"""Base exceptions for menu-tenancy.

This module defines the base exception hierarchy. All exceptions inherit
from MenuTenancyError and carry an error code, structured details and,
through the status mapping, an HTTP status code for API responses.
"""

from typing import Any, Dict, Optional


class MenuTenancyError(Exception):
    """Base exception for all menu-tenancy errors.

    All exceptions in the library inherit from this base class and include
    structured error information for better debugging and API responses.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _get_status_code
    return _get_status_code(exception)


def create_error_response(exception: MenuTenancyError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The menu-tenancy exception

    Returns:
        Error response dictionary
    """
    return {
        "success": False,
        "message": exception.message,
        "error": exception.to_dict(),
    }
