"""Chunk rejection exceptions.

ONLY per-chunk rejections - out-of-range index, wrong length, duplicate
submission and hash mismatch.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Optional

from ....core.exceptions import ConflictError, IntegrityError, ValidationError


class InvalidChunkIndex(ValidationError):
    """Raised when a chunk index falls outside ``[0, total_chunks)``."""

    error_code_default = "INVALID_CHUNK_INDEX"

    def __init__(self, upload_id: str, chunk_index: int, total_chunks: int):
        super().__init__(
            f"Invalid chunk index {chunk_index}; expected 0-{total_chunks - 1}",
            details={
                "upload_id": upload_id,
                "chunk_index": chunk_index,
                "total_chunks": total_chunks,
            },
        )


class InvalidChunkSize(ValidationError):
    """Raised when a chunk's length differs from what its index requires."""

    error_code_default = "INVALID_CHUNK_SIZE"

    def __init__(self, upload_id: str, chunk_index: int, expected: int, actual: Optional[int]):
        if actual is None:
            message = f"Chunk {chunk_index} exceeds the {expected} byte chunk size"
        else:
            message = f"Chunk {chunk_index} must be {expected} bytes, got {actual}"
        super().__init__(
            message,
            details={
                "upload_id": upload_id,
                "chunk_index": chunk_index,
                "expected_size": expected,
                "actual_size": actual,
            },
        )

    @classmethod
    def oversized(cls, upload_id: str, chunk_index: int, chunk_size: int) -> "InvalidChunkSize":
        """Part rejected while reading, before its full length is known."""
        return cls(upload_id, chunk_index, chunk_size, None)


class ChunkAlreadyUploaded(ConflictError):
    """Raised when an index was already accepted or is being accepted."""

    error_code_default = "CHUNK_ALREADY_UPLOADED"

    def __init__(self, upload_id: str, chunk_index: int):
        super().__init__(
            f"Chunk {chunk_index} already uploaded",
            details={"upload_id": upload_id, "chunk_index": chunk_index},
        )


class ChunkHashMismatch(IntegrityError):
    """Raised when chunk bytes do not hash to the declared digest.

    Security relevant: always accompanied by an audit event.
    """

    error_code_default = "CHUNK_HASH_MISMATCH"

    def __init__(self, upload_id: str, chunk_index: int, expected_hash: str, actual_hash: str):
        self.expected_hash = expected_hash
        self.actual_hash = actual_hash
        super().__init__(
            "Chunk integrity check failed - hash mismatch",
            details={
                "upload_id": upload_id,
                "chunk_index": chunk_index,
                "expected_hash": expected_hash,
                "actual_hash": actual_hash,
            },
        )
