"""Duplicate content hash exception.

ONLY content-hash conflicts - another file with the same bytes was
committed first.

Following maximum separation architecture - one file = one purpose.
"""

from ....core.exceptions import DuplicateResourceError


class DuplicateContentHash(DuplicateResourceError):
    """Raised by repositories when the unique content hash already exists."""

    error_code_default = "DUPLICATE_CONTENT_HASH"

    def __init__(self, content_hash: str):
        self.content_hash = content_hash
        super().__init__(
            f"A stored file with content hash {content_hash} already exists",
            details={"content_hash": content_hash},
        )
