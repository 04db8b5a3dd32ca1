"""Base exceptions for seqvault.

All exceptions inherit from SeqVaultError and carry a machine-readable
error code, a human-readable message and structured details that the
HTTP layer renders verbatim.
"""

from typing import Any, Dict, Optional


class SeqVaultError(Exception):
    """Base exception for all seqvault errors."""

    error_code_default: str = "INTERNAL_ERROR"

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
        self.error_code = error_code or self.error_code_default
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _lookup
    return _lookup(exception)


def create_error_response(exception: SeqVaultError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The seqvault exception

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
