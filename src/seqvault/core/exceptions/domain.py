"""Domain exception categories for seqvault.

Feature exceptions subclass one of these so the HTTP mapping can be
expressed per category rather than per concrete error.
"""

from .base import SeqVaultError


# Configuration Errors
class ConfigurationError(SeqVaultError):
    """Raised when there's a configuration issue."""
    error_code_default = "CONFIGURATION_ERROR"


# Client input
class ValidationError(SeqVaultError):
    """Raised when caller-supplied input violates a constraint."""
    error_code_default = "VALIDATION_FAILED"


class ResourceNotFoundError(SeqVaultError):
    """Raised when a requested resource does not exist."""
    error_code_default = "NOT_FOUND"


class PermissionDeniedError(SeqVaultError):
    """Raised when the caller does not own the resource."""
    error_code_default = "FORBIDDEN"


class InvalidStateError(SeqVaultError):
    """Raised when an operation is not allowed in the current state."""
    error_code_default = "INVALID_STATE"


class ExpiredResourceError(InvalidStateError):
    """Raised when a time-limited resource is past its expiry."""
    error_code_default = "EXPIRED"


class ConflictError(SeqVaultError):
    """Raised when an operation conflicts with a concurrent one."""
    error_code_default = "CONFLICT"


class DuplicateResourceError(ConflictError):
    """Raised when creating a resource whose unique key already exists."""
    error_code_default = "DUPLICATE_RESOURCE"


# Integrity / security
class IntegrityError(SeqVaultError):
    """Raised when content does not match what it claims to be."""
    error_code_default = "INTEGRITY_ERROR"


# Infrastructure
class StorageError(SeqVaultError):
    """Raised when a storage backend cannot complete an operation."""
    error_code_default = "STORAGE_ERROR"


class ServiceUnavailableError(SeqVaultError):
    """Raised when a required backend is unreachable."""
    error_code_default = "SERVICE_UNAVAILABLE"


# Throttling
class RateLimitExceededError(SeqVaultError):
    """Raised when a caller exceeds a request quota."""
    error_code_default = "RATE_LIMITED"
