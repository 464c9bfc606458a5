"""Base exceptions for neo-permissions.

All exceptions raised by the library inherit from NeoPermissionsError and
carry an error code plus structured details, so HTTP layers can render them
without knowing every subclass.
"""

from typing import Any, Dict, Optional


class NeoPermissionsError(Exception):
    """Base exception for all neo-permissions errors."""

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


class ConfigurationError(NeoPermissionsError):
    """Raised when settings reference something that cannot be resolved."""
    pass


def create_error_response(exception: NeoPermissionsError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The neo-permissions exception

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
