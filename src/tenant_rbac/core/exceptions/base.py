"""Base exceptions for tenant-rbac.

All exceptions inherit from TenantRbacError and carry an error code and a
details mapping. Translating them into transport-level responses is left to
the calling application.
"""

from typing import Any, Dict, Optional


class TenantRbacError(Exception):
    """Base exception for all tenant-rbac errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def create_error_response(exception: TenantRbacError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The tenant-rbac exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }


class ConfigurationError(TenantRbacError):
    """Raised when required settings are missing or invalid."""
    pass
