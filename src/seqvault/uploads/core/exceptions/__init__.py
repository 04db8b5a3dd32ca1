"""Upload exceptions, one module per failure kind."""

from .validation_failed import ValidationFailed
from .upload_session_not_found import UploadSessionNotFound
from .upload_forbidden import UploadForbidden
from .invalid_upload_state import InvalidUploadState, SessionExpired
from .chunk_rejected import (
    InvalidChunkIndex,
    InvalidChunkSize,
    ChunkAlreadyUploaded,
    ChunkHashMismatch,
)
from .incomplete_upload import IncompleteUpload
from .integrity_check_failed import IntegrityCheckFailed
from .storage_write_failed import StorageWriteFailed
from .duplicate_content_hash import DuplicateContentHash
from .metadata_extraction_failed import MetadataExtractionFailed
from .upload_rate_limited import UploadRateLimited

__all__ = [
    "ValidationFailed",
    "UploadSessionNotFound",
    "UploadForbidden",
    "InvalidUploadState",
    "SessionExpired",
    "InvalidChunkIndex",
    "InvalidChunkSize",
    "ChunkAlreadyUploaded",
    "ChunkHashMismatch",
    "IncompleteUpload",
    "IntegrityCheckFailed",
    "StorageWriteFailed",
    "DuplicateContentHash",
    "MetadataExtractionFailed",
    "UploadRateLimited",
]
