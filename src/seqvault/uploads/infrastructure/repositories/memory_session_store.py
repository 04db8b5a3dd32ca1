"""In-memory upload session store.

Single-process store backed by a dict. The lock is held only for the
in-memory mutation itself, never across I/O.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from ...core.entities import UploadSession
from ...core.value_objects import UploadStatus

logger = logging.getLogger(__name__)


class MemoryUploadSessionStore:
    """Upload session store for a single process."""

    def __init__(self):
        self._sessions: Dict[str, UploadSession] = {}
        self._reserved: Dict[str, Set[int]] = {}
        self._lock = asyncio.Lock()

    async def create(self, session: UploadSession) -> None:
        async with self._lock:
            if session.upload_id in self._sessions:
                raise ValueError(f"Upload session {session.upload_id} already exists")
            self._sessions[session.upload_id] = session.clone()
            self._reserved[session.upload_id] = set()

    async def get(self, upload_id: str) -> Optional[UploadSession]:
        async with self._lock:
            session = self._sessions.get(upload_id)
            return session.clone() if session else None

    async def delete(self, upload_id: str) -> bool:
        async with self._lock:
            self._reserved.pop(upload_id, None)
            return self._sessions.pop(upload_id, None) is not None

    async def reserve_chunk(self, upload_id: str, chunk_index: int) -> bool:
        async with self._lock:
            session = self._sessions.get(upload_id)
            if session is None or not session.status.accepts_chunks:
                return False
            reserved = self._reserved.setdefault(upload_id, set())
            if chunk_index in session.received_chunks or chunk_index in reserved:
                return False
            reserved.add(chunk_index)
            return True

    async def release_chunk(self, upload_id: str, chunk_index: int) -> None:
        async with self._lock:
            self._reserved.get(upload_id, set()).discard(chunk_index)

    async def commit_chunk(self, upload_id: str, chunk_index: int) -> Optional[UploadSession]:
        async with self._lock:
            session = self._sessions.get(upload_id)
            reserved = self._reserved.get(upload_id, set())
            reserved.discard(chunk_index)
            if session is None or not session.status.accepts_chunks:
                return None
            session.record_chunk(chunk_index)
            return session.clone()

    async def transition(
        self,
        upload_id: str,
        from_statuses: Iterable[UploadStatus],
        to_status: UploadStatus,
    ) -> Optional[UploadSession]:
        allowed = set(from_statuses)
        async with self._lock:
            session = self._sessions.get(upload_id)
            if session is None or session.status not in allowed:
                return None
            if not session.status.can_transition_to(to_status):
                logger.warning(
                    f"Refused illegal transition {session.status.value} -> {to_status.value} "
                    f"for upload {upload_id}"
                )
                return None
            session.status = to_status
            return session.clone()

    async def sweep_expired(self, now: datetime) -> List[UploadSession]:
        async with self._lock:
            expired = [
                s for s in self._sessions.values()
                if s.status is not UploadStatus.PROCESSING and s.is_expired(now)
            ]
            for session in expired:
                del self._sessions[session.upload_id]
                self._reserved.pop(session.upload_id, None)
        if expired:
            logger.info(f"Swept {len(expired)} expired upload sessions from memory")
        return expired

    async def list_upload_ids(self) -> List[str]:
        async with self._lock:
            return list(self._sessions)
