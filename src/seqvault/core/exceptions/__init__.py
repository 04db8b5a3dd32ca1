"""Exception hierarchy shared by all seqvault features."""

from .base import SeqVaultError, create_error_response, get_http_status_code
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

__all__ = [
    "SeqVaultError",
    "create_error_response",
    "get_http_status_code",
    "ConfigurationError",
    "ConflictError",
    "DuplicateResourceError",
    "ExpiredResourceError",
    "IntegrityError",
    "InvalidStateError",
    "PermissionDeniedError",
    "RateLimitExceededError",
    "ResourceNotFoundError",
    "ServiceUnavailableError",
    "StorageError",
    "ValidationError",
]
