"""Integrity check failed exception.

ONLY whole-file integrity failures - the assembled content does not match
its claimed format or declared size.

Following maximum separation architecture - one file = one purpose.
"""

from typing import List, Optional

from ....core.exceptions import IntegrityError


class IntegrityCheckFailed(IntegrityError):
    """Raised when assembled content fails validation; nothing is persisted."""

    error_code_default = "INTEGRITY_CHECK_FAILED"

    def __init__(self, errors: List[str], upload_id: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(
            "File integrity check failed: " + "; ".join(self.errors),
            details={"upload_id": upload_id, "errors": self.errors},
        )
