"""Upload forbidden exception.

ONLY ownership violations - a caller touched a session or product it
does not own.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Any, Dict, Optional

from ....core.exceptions import PermissionDeniedError


class UploadForbidden(PermissionDeniedError):
    """Raised when the caller is not the owner of the session or product."""

    error_code_default = "FORBIDDEN"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)

    @classmethod
    def for_session(cls, upload_id: str) -> 'UploadForbidden':
        return cls(
            "You do not have access to this upload session",
            details={"upload_id": upload_id},
        )

    @classmethod
    def for_product(cls, product_id: str) -> 'UploadForbidden':
        return cls(
            "You do not have permission to upload files to this product",
            details={"product_id": product_id},
        )
