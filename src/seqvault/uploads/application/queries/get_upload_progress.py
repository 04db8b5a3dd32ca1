"""Get upload progress query.

ONLY progress lookup - lets an owner see which chunks have arrived so an
interrupted upload can resume.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..services.session_guard import SessionGuard
from ...core.value_objects import FileCategory, UploadStatus


@dataclass
class UploadProgress:
    """Owner's view of a session."""

    upload_id: str
    status: UploadStatus
    file_name: str
    file_size: int
    category: FileCategory
    chunk_size: int
    total_chunks: int
    received_chunks: List[int] = field(default_factory=list)
    missing_chunks: List[int] = field(default_factory=list)
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @property
    def progress(self) -> float:
        return len(self.received_chunks) / self.total_chunks


class GetUploadProgressQuery:
    """Query for an upload session's progress."""

    def __init__(self, guard: SessionGuard):
        self._guard = guard

    async def execute(self, upload_id: str, user_id: str) -> UploadProgress:
        """Raises UploadSessionNotFound, UploadForbidden or SessionExpired."""
        session = await self._guard.load_owned(upload_id, user_id)
        await self._guard.ensure_not_expired(session)
        return UploadProgress(
            upload_id=session.upload_id,
            status=session.status,
            file_name=session.file_name,
            file_size=session.file_size,
            category=session.category,
            chunk_size=session.chunk_size,
            total_chunks=session.total_chunks,
            received_chunks=sorted(session.received_chunks),
            missing_chunks=session.missing_chunks(),
            created_at=session.created_at,
            expires_at=session.expires_at,
        )


def create_get_upload_progress_query(guard: SessionGuard) -> GetUploadProgressQuery:
    """Create get upload progress query."""
    return GetUploadProgressQuery(guard)
