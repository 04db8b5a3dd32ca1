"""Upload value objects."""

from .upload_session_id import UploadSessionId
from .file_id import FileId
from .checksum import Checksum
from .storage_key import StorageKey
from .file_category import FileCategory, CategoryRules, CATEGORY_RULES
from .file_format import FileFormat, file_extension
from .upload_status import UploadStatus, TERMINAL_STATUSES
from .rate_limit import RateLimit, RateLimitState
from .format_metadata import (
    FseqMetadata,
    XsqMetadata,
    AbsentMetadata,
    FormatMetadata,
    ABSENT_METADATA,
    metadata_from_dict,
)

__all__ = [
    "UploadSessionId",
    "FileId",
    "Checksum",
    "StorageKey",
    "FileCategory",
    "CategoryRules",
    "CATEGORY_RULES",
    "FileFormat",
    "file_extension",
    "UploadStatus",
    "TERMINAL_STATUSES",
    "FseqMetadata",
    "XsqMetadata",
    "AbsentMetadata",
    "FormatMetadata",
    "ABSENT_METADATA",
    "metadata_from_dict",
    "RateLimit",
    "RateLimitState",
]
