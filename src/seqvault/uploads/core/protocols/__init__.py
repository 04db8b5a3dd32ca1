"""Upload protocols: the seams to stores, storage, catalog and audit."""

from .upload_session_store import UploadSessionStore
from .chunk_staging_area import ChunkStagingArea
from .storage_provider import StorageProvider
from .stored_file_repository import StoredFileRepository
from .product_ownership import ProductOwnershipChecker
from .upload_rate_limiter import UploadRateLimiter
from .audit_sink import AuditSink, AuditEvent, AuditAction, AuditSeverity

__all__ = [
    "UploadSessionStore",
    "ChunkStagingArea",
    "StorageProvider",
    "StoredFileRepository",
    "ProductOwnershipChecker",
    "UploadRateLimiter",
    "AuditSink",
    "AuditEvent",
    "AuditAction",
    "AuditSeverity",
]
