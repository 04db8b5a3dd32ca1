"""Upload services.

UploadCoordinator is imported from ``upload_coordinator`` directly.
"""

from .audit_recorder import AuditRecorder
from .cleanup_service import CleanupReport, CleanupService, CleanupServiceConfig, ExpirySweeper
from .file_assembler import AssembledFile, FileAssembler
from .metadata_extractor import MetadataExtractor, parse_fseq_header, parse_xsq_file
from .product_access import ProductAccessPolicy
from .session_guard import SessionGuard
from .stored_file_committer import CommitRequest, CommitResult, StoredFileCommitter
from .upload_rate_policy import DEFAULT_UPLOAD_RATE_LIMIT, UploadRatePolicy

__all__ = [
    "AuditRecorder",
    "CleanupReport",
    "CleanupService",
    "CleanupServiceConfig",
    "ExpirySweeper",
    "AssembledFile",
    "FileAssembler",
    "MetadataExtractor",
    "parse_fseq_header",
    "parse_xsq_file",
    "ProductAccessPolicy",
    "SessionGuard",
    "CommitRequest",
    "CommitResult",
    "StoredFileCommitter",
    "DEFAULT_UPLOAD_RATE_LIMIT",
    "UploadRatePolicy",
]
