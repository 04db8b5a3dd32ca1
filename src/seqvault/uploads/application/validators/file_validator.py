"""File validator.

ONLY request-time file validation - file name safety, extension, size and
MIME plausibility for the declared category. Runs before any bytes are
accepted.

Following maximum separation architecture - one file = one purpose.
"""

import posixpath
import re
import unicodedata
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Union

from ...core.value_objects import FileCategory, file_extension


# Issue codes
INVALID_FILENAME = "INVALID_FILENAME"
INVALID_CATEGORY = "INVALID_CATEGORY"
INVALID_EXTENSION = "INVALID_EXTENSION"
INVALID_FILE_SIZE = "INVALID_FILE_SIZE"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
INVALID_MIME_TYPE = "INVALID_MIME_TYPE"
UNEXPECTED_MIME_TYPE = "UNEXPECTED_MIME_TYPE"

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")

BLOCKED_MIME_TYPES: FrozenSet[str] = frozenset({
    "application/x-msdownload",
    "application/x-msdos-program",
    "application/x-dosexec",
    "application/x-executable",
    "application/x-sh",
    "application/x-httpd-php",
    "application/javascript",
    "text/javascript",
    "text/html",
})


@dataclass(frozen=True)
class ValidationIssue:
    """One violated constraint."""

    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of ``validate_file``: blocking errors and informational warnings."""

    issues: List[ValidationIssue] = field(default_factory=list)
    warning_issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> List[str]:
        return [str(issue) for issue in self.issues]

    @property
    def warnings(self) -> List[str]:
        return [str(issue) for issue in self.warning_issues]

    @property
    def error_codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def error(self, code: str, message: str) -> None:
        self.issues.append(ValidationIssue(code, message))

    def warn(self, code: str, message: str) -> None:
        self.warning_issues.append(ValidationIssue(code, message))


@dataclass
class FileValidatorConfig:
    """Configuration for file validator."""

    max_file_name_length: int = 255
    blocked_mime_types: FrozenSet[str] = BLOCKED_MIME_TYPES


class FileValidator:
    """File validation service.

    Every check runs and contributes its own labelled issue so the caller
    sees all violated constraints at once.
    """

    def __init__(self, config: Optional[FileValidatorConfig] = None):
        self._config = config or FileValidatorConfig()

    def validate_file(
        self,
        file_name: str,
        file_size: int,
        mime_type: Optional[str],
        category: Union[FileCategory, str],
    ) -> ValidationResult:
        result = ValidationResult()

        name_problem = self.check_file_name(file_name)
        if name_problem:
            result.error(INVALID_FILENAME, name_problem)

        resolved = category if isinstance(category, FileCategory) else FileCategory.parse(category)
        if resolved is None:
            valid = ", ".join(c.value for c in FileCategory)
            result.error(INVALID_CATEGORY, f"Unknown file category '{category}'; expected one of {valid}")

        if resolved is not None:
            rules = resolved.rules
            extension = file_extension(file_name or "")
            if not rules.allows_extension(extension):
                result.error(
                    INVALID_EXTENSION,
                    f"Invalid file extension for {resolved.value}: expected {rules.expected_extensions}, "
                    f"got {extension or '(none)'}",
                )

        if file_size is None or file_size <= 0:
            result.error(INVALID_FILE_SIZE, "File size must be greater than 0")
        elif resolved is not None and file_size > resolved.rules.max_size_bytes:
            result.error(
                FILE_TOO_LARGE,
                f"File size {file_size} bytes exceeds the {resolved.rules.max_size_bytes} byte limit "
                f"for {resolved.value}",
            )

        normalized_mime = (mime_type or "").lower().split(";", 1)[0].strip()
        if normalized_mime in self._config.blocked_mime_types:
            result.error(INVALID_MIME_TYPE, f"MIME type {normalized_mime} is not allowed")
        elif resolved is not None and not resolved.rules.allows_mime_type(normalized_mime):
            result.warn(
                UNEXPECTED_MIME_TYPE,
                f"Unexpected MIME type {normalized_mime or '(none)'} for {resolved.value}",
            )

        return result

    def check_file_name(self, file_name: str) -> Optional[str]:
        """Return why ``file_name`` is unsafe, or None when it is fine."""
        if not file_name or not file_name.strip():
            return "file name is empty"

        if any(ch == "\x00" or unicodedata.category(ch) == "Cc" for ch in file_name):
            return "file name contains control characters"

        unified = file_name.replace("\\", "/")
        normalized = posixpath.normpath(unified)
        if (
            unified.startswith("/")
            or _DRIVE_LETTER.match(unified)
            or normalized == ".."
            or normalized.startswith("../")
        ):
            return "path traversal detected"

        if "/" in unified:
            return "file name must not contain directory components"

        if file_name.startswith("."):
            return "hidden files are not allowed"

        if len(file_name) > self._config.max_file_name_length:
            return f"file name longer than {self._config.max_file_name_length} characters"

        return None


def create_file_validator(config: Optional[FileValidatorConfig] = None) -> FileValidator:
    """Create file validator."""
    return FileValidator(config)

