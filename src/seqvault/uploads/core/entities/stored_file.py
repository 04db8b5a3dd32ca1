"""Stored file entity.

ONLY stored file - the durable, deduplicated record of a committed file.
Content hash is globally unique across all stored files.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....utils.datetime import utc_now
from ..value_objects import (
    ABSENT_METADATA,
    FileCategory,
    FormatMetadata,
)


@dataclass
class StoredFile:
    """Stored file entity."""

    file_id: str
    file_name: str          # sanitized name used in the storage key
    original_name: str      # name as declared by the uploader
    category: FileCategory
    size_bytes: int
    content_hash: str
    storage_key: str
    mime_type: str
    metadata: FormatMetadata = ABSENT_METADATA

    product_id: Optional[str] = None
    version_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_id": self.file_id,
            "file_name": self.file_name,
            "original_name": self.original_name,
            "category": self.category.value,
            "size_bytes": self.size_bytes,
            "content_hash": self.content_hash,
            "storage_key": self.storage_key,
            "mime_type": self.mime_type,
            "metadata": self.metadata.to_dict(),
            "product_id": self.product_id,
            "version_id": self.version_id,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }
