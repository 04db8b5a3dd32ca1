"""Storage write failed exception.

ONLY storage failures - staging or durable storage could not be written.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Optional

from ....core.exceptions import StorageError


class StorageWriteFailed(StorageError):
    """Raised when a staging or durable write fails."""

    error_code_default = "STORAGE_WRITE_FAILED"

    def __init__(self, message: str, storage_key: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(
            message,
            details={"storage_key": storage_key, "reason": reason},
        )
