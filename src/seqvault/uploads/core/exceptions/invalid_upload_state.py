"""Invalid upload state exceptions.

ONLY session state violations - the operation is not legal in the
session's current status, or the session has expired.

Following maximum separation architecture - one file = one purpose.
"""

from datetime import datetime
from typing import Optional

from ....core.exceptions import ExpiredResourceError, InvalidStateError
from ..value_objects import UploadStatus


class InvalidUploadState(InvalidStateError):
    """Raised when a session is in the wrong status for an operation."""

    error_code_default = "INVALID_STATE"

    def __init__(self, upload_id: str, current_status: UploadStatus, operation: str):
        self.upload_id = upload_id
        self.current_status = current_status
        super().__init__(
            f"Cannot {operation}: upload session is {current_status.value}",
            details={
                "upload_id": upload_id,
                "current_status": current_status.value,
                "operation": operation,
            },
        )


class SessionExpired(ExpiredResourceError):
    """Raised when a session is touched after its expiry time."""

    error_code_default = "SESSION_EXPIRED"

    def __init__(self, upload_id: str, expired_at: Optional[datetime] = None):
        self.upload_id = upload_id
        super().__init__(
            f"Upload session {upload_id} has expired",
            details={
                "upload_id": upload_id,
                "expired_at": expired_at.isoformat() if expired_at else None,
            },
        )
