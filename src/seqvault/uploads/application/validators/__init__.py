"""Upload validators."""

from .file_validator import (
    FileValidator,
    FileValidatorConfig,
    ValidationIssue,
    ValidationResult,
    create_file_validator,
)
from .file_integrity_validator import (
    FileIntegrityValidator,
    IntegrityResult,
    create_file_integrity_validator,
)

__all__ = [
    "FileValidator",
    "FileValidatorConfig",
    "ValidationIssue",
    "ValidationResult",
    "create_file_validator",
    "FileIntegrityValidator",
    "IntegrityResult",
    "create_file_integrity_validator",
]
