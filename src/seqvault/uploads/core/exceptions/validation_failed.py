"""Validation failed exception.

ONLY validation failed - an upload request was rejected before any bytes
were accepted. Details enumerate every violated constraint.

Following maximum separation architecture - one file = one purpose.
"""

from typing import List, Optional

from ....core.exceptions import ValidationError


class ValidationFailed(ValidationError):
    """Raised when ``validate_file`` reports blocking errors."""

    error_code_default = "VALIDATION_FAILED"

    def __init__(
        self,
        errors: List[str],
        warnings: Optional[List[str]] = None,
        error_codes: Optional[List[str]] = None,
        message: Optional[str] = None,
    ):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        self.error_codes = list(error_codes or [])
        super().__init__(
            message or "File validation failed: " + "; ".join(self.errors),
            details={
                "errors": self.errors,
                "warnings": self.warnings,
                "error_codes": self.error_codes,
            },
        )
