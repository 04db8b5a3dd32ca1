"""Upload session not found exception.

ONLY session not found - no live session exists under the given id.

Following maximum separation architecture - one file = one purpose.
"""

from ....core.exceptions import ResourceNotFoundError


class UploadSessionNotFound(ResourceNotFoundError):
    """Raised when an upload id is unknown, malformed or already finished."""

    error_code_default = "NOT_FOUND"

    def __init__(self, upload_id: str):
        self.upload_id = upload_id
        super().__init__(
            f"Upload session {upload_id} not found",
            details={"upload_id": upload_id},
        )
