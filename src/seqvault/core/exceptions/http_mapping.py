"""HTTP status code mapping for exceptions.

Lookup walks the exception's MRO so feature exceptions inherit the
status of their category unless mapped explicitly.
"""

from typing import Dict, Optional, Type

from .base import SeqVaultError
from .domain import (
    ConfigurationError,
    ConflictError,
    DuplicateResourceError,
    ExpiredResourceError,
    IntegrityError,
    InvalidStateError,
    PermissionDeniedError,
    RateLimitExceededError,
    ResourceNotFoundError,
    ServiceUnavailableError,
    StorageError,
    ValidationError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 403 Forbidden
    PermissionDeniedError: 403,

    # 404 Not Found
    ResourceNotFoundError: 404,

    # 409 Conflict
    InvalidStateError: 409,
    ConflictError: 409,
    DuplicateResourceError: 409,

    # 410 Gone
    ExpiredResourceError: 410,

    # 422 Unprocessable Entity
    IntegrityError: 422,

    # 429 Too Many Requests
    RateLimitExceededError: 429,

    # 500 Internal Server Error
    ConfigurationError: 500,
    SeqVaultError: 500,

    # 503 Service Unavailable
    StorageError: 503,
    ServiceUnavailableError: 503,
}


def _lookup(exception_class: Type[Exception]) -> Optional[int]:
    for klass in exception_class.__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return None


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception, 500 when unmapped."""
    return _lookup(type(exception)) or 500
