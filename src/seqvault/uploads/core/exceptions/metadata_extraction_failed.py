"""Metadata extraction failed exception.

ONLY metadata extraction failures - never surfaced to callers; the
finalize pipeline downgrades it to absent metadata.

Following maximum separation architecture - one file = one purpose.
"""

from ....core.exceptions import SeqVaultError


class MetadataExtractionFailed(SeqVaultError):
    """Raised when a format parser cannot read a file's metadata."""

    error_code_default = "METADATA_EXTRACTION_FAILED"

    def __init__(self, file_format: str, reason: str):
        self.file_format = file_format
        self.reason = reason
        super().__init__(
            f"Could not extract {file_format} metadata: {reason}",
            details={"format": file_format, "reason": reason},
        )
