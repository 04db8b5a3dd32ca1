"""Incomplete upload exception.

ONLY premature finalize - completion requested before every chunk arrived.

Following maximum separation architecture - one file = one purpose.
"""

from typing import List, Optional

from ....core.exceptions import ValidationError


class IncompleteUpload(ValidationError):
    """Raised when ``received < total`` at completion time."""

    error_code_default = "INCOMPLETE_UPLOAD"

    def __init__(
        self,
        upload_id: str,
        received: int,
        total: int,
        missing: Optional[List[int]] = None,
    ):
        self.received = received
        self.total = total
        super().__init__(
            f"Upload incomplete: {received}/{total} chunks received",
            details={
                "upload_id": upload_id,
                "received_chunks": received,
                "total_chunks": total,
                "missing_chunks": list(missing or [])[:100],
            },
        )
