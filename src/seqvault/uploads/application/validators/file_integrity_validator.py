"""File integrity validator.

ONLY content integrity validation - checks that the first bytes of an
actual file carry the magic signature of the format its name claims.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from typing import List

from ...core.value_objects import FileFormat
from ...core.value_objects.file_format import describe_signature

INTEGRITY_CHECK_FAILED = "INTEGRITY_CHECK_FAILED"


@dataclass
class IntegrityResult:
    """Outcome of a content integrity check."""

    valid: bool
    errors: List[str] = field(default_factory=list)
    skipped: bool = False


class FileIntegrityValidator:
    """Magic-byte signature validation.

    Formats with no fixed signature (XML family, unknown) pass with
    ``skipped`` set.
    """

    def validate_file_integrity(self, header: bytes, file_name: str) -> IntegrityResult:
        file_format = FileFormat.from_file_name(file_name)

        if not file_format.has_signature:
            return IntegrityResult(valid=True, skipped=True)

        if file_format.matches_signature(bytes(header)):
            return IntegrityResult(valid=True)

        return IntegrityResult(
            valid=False,
            errors=[
                f"{INTEGRITY_CHECK_FAILED}: file content does not match the "
                f"{describe_signature(file_format)} signature expected for .{file_format.value} files"
            ],
        )


def create_file_integrity_validator() -> FileIntegrityValidator:
    """Create file integrity validator."""
    return FileIntegrityValidator()
