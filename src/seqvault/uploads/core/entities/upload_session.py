"""Upload session entity.

ONLY upload session - tracks one in-progress chunked upload: what was
declared at initiation, which chunk indices have arrived, and where the
session is in its lifecycle.

Following maximum separation architecture - one file = one purpose.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set

from ....utils.datetime import parse_iso, utc_now
from ..value_objects import FileCategory, UploadSessionId, UploadStatus


def calculate_total_chunks(file_size: int, chunk_size: int) -> int:
    """``ceil(file_size / chunk_size)``."""
    return (file_size + chunk_size - 1) // chunk_size


@dataclass
class UploadSession:
    """Upload session entity.

    Invariants:
    - ``received_chunks`` only holds indices in ``[0, total_chunks)``
    - only ``owner_id`` may mutate or observe the session
    - terminal sessions never change again
    """

    # Core identification
    upload_id: str
    owner_id: str

    # Declared file properties
    file_name: str
    file_size: int
    mime_type: str
    category: FileCategory

    # Chunking
    chunk_size: int
    total_chunks: int
    received_chunks: Set[int] = field(default_factory=set)

    # Lifecycle
    status: UploadStatus = UploadStatus.INITIATED
    created_at: datetime = field(default_factory=utc_now)
    expires_at: datetime = field(default_factory=lambda: utc_now() + timedelta(hours=24))

    # Optional catalog linkage
    product_id: Optional[str] = None
    version_id: Optional[str] = None

    def __post_init__(self):
        """Validate entity state after initialization."""
        if not self.owner_id:
            raise ValueError("Upload session requires an owner")
        if self.file_size <= 0:
            raise ValueError("Declared file size must be positive")
        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        if self.total_chunks != calculate_total_chunks(self.file_size, self.chunk_size):
            raise ValueError("Total chunks does not match file size and chunk size")
        if any(not 0 <= index < self.total_chunks for index in self.received_chunks):
            raise ValueError("Received chunk index out of range")

    @classmethod
    def create(
        cls,
        owner_id: str,
        file_name: str,
        file_size: int,
        mime_type: str,
        category: FileCategory,
        chunk_size: int,
        ttl: timedelta,
        now: Optional[datetime] = None,
        product_id: Optional[str] = None,
        version_id: Optional[str] = None,
    ) -> 'UploadSession':
        """Start a fresh session in INITIATED with an empty received set."""
        now = now or utc_now()
        return cls(
            upload_id=UploadSessionId.generate().value,
            owner_id=owner_id,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            category=category,
            chunk_size=chunk_size,
            total_chunks=calculate_total_chunks(file_size, chunk_size),
            created_at=now,
            expires_at=now + ttl,
            product_id=product_id,
            version_id=version_id,
        )

    # Progress

    @property
    def received_count(self) -> int:
        return len(self.received_chunks)

    @property
    def progress(self) -> float:
        return self.received_count / self.total_chunks

    @property
    def all_chunks_received(self) -> bool:
        return self.received_count == self.total_chunks

    def missing_chunks(self) -> List[int]:
        return [i for i in range(self.total_chunks) if i not in self.received_chunks]

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < self.total_chunks

    def expected_chunk_length(self, index: int) -> int:
        """Every chunk is ``chunk_size`` bytes except the last, which holds the rest."""
        if index == self.total_chunks - 1:
            return self.file_size - self.chunk_size * (self.total_chunks - 1)
        return self.chunk_size

    # Lifecycle

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) >= self.expires_at

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def record_chunk(self, index: int) -> None:
        """Add ``index`` to the received set and advance the status.

        Stores call this inside their atomic section.
        """
        if not self.status.accepts_chunks:
            raise ValueError(f"Cannot add chunk: session status is {self.status.value}")
        if not self.is_valid_index(index):
            raise ValueError(f"Chunk index {index} out of range")
        self.received_chunks.add(index)
        self.status = (
            UploadStatus.ALL_CHUNKS_UPLOADED if self.all_chunks_received
            else UploadStatus.UPLOADING
        )

    def clone(self) -> 'UploadSession':
        return copy.deepcopy(self)

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        return {
            "upload_id": self.upload_id,
            "owner_id": self.owner_id,
            "file_name": self.file_name,
            "file_size": self.file_size,
            "mime_type": self.mime_type,
            "category": self.category.value,
            "chunk_size": self.chunk_size,
            "total_chunks": self.total_chunks,
            "received_chunks": sorted(self.received_chunks),
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
            "product_id": self.product_id,
            "version_id": self.version_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadSession':
        return cls(
            upload_id=data["upload_id"],
            owner_id=data["owner_id"],
            file_name=data["file_name"],
            file_size=int(data["file_size"]),
            mime_type=data["mime_type"],
            category=FileCategory(data["category"]),
            chunk_size=int(data["chunk_size"]),
            total_chunks=int(data["total_chunks"]),
            received_chunks={int(i) for i in data.get("received_chunks", [])},
            status=UploadStatus(data["status"]),
            created_at=parse_iso(data["created_at"]),
            expires_at=parse_iso(data["expires_at"]),
            product_id=data.get("product_id"),
            version_id=data.get("version_id"),
        )
