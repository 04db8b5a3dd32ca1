"""Submit chunk command.

ONLY chunk ingestion - verifies one chunk against its declared hash,
stages it and records it on the session.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass

from ..services.audit_recorder import AuditRecorder
from ..services.session_guard import SessionGuard
from ...core.entities import UploadSession
from ...core.exceptions import (
    ChunkAlreadyUploaded,
    ChunkHashMismatch,
    InvalidChunkIndex,
    InvalidChunkSize,
    InvalidUploadState,
    SessionExpired,
    StorageWriteFailed,
    UploadSessionNotFound,
)
from ...core.protocols import ChunkStagingArea, UploadSessionStore
from ...core.value_objects import Checksum, UploadStatus

logger = logging.getLogger(__name__)


@dataclass
class SubmitChunkData:
    """Data required to submit one chunk."""

    upload_id: str
    user_id: str
    chunk_index: int      # 0-based
    chunk_hash: str       # SHA-256 hex of content
    content: bytes


@dataclass
class SubmitChunkResult:
    """Result of chunk submission."""

    upload_id: str
    chunk_index: int
    received_chunks: int
    total_chunks: int
    status: UploadStatus

    @property
    def progress(self) -> float:
        return self.received_chunks / self.total_chunks

    @property
    def all_chunks_uploaded(self) -> bool:
        return self.status is UploadStatus.ALL_CHUNKS_UPLOADED


class SubmitChunkCommand:
    """Command to ingest a single chunk.

    The per-index reservation is an atomic check-and-set in the store, so
    concurrent submissions of the same index accept exactly one.
    """

    def __init__(
        self,
        store: UploadSessionStore,
        staging: ChunkStagingArea,
        guard: SessionGuard,
        audit: AuditRecorder,
    ):
        self._store = store
        self._staging = staging
        self._guard = guard
        self._audit = audit

    async def execute(self, data: SubmitChunkData) -> SubmitChunkResult:
        """Execute chunk submission.

        Raises:
            UploadSessionNotFound, UploadForbidden, SessionExpired,
            InvalidUploadState, InvalidChunkIndex, ChunkAlreadyUploaded,
            ChunkHashMismatch, InvalidChunkSize, StorageWriteFailed
        """
        session = await self._guard.load_owned(data.upload_id, data.user_id)
        await self._guard.ensure_not_expired(session)

        if session.status.is_terminal:
            raise InvalidUploadState(session.upload_id, session.status, "upload chunk")

        if not session.is_valid_index(data.chunk_index):
            raise InvalidChunkIndex(session.upload_id, data.chunk_index, session.total_chunks)

        if data.chunk_index in session.received_chunks:
            raise ChunkAlreadyUploaded(session.upload_id, data.chunk_index)

        if not session.status.accepts_chunks:
            raise InvalidUploadState(session.upload_id, session.status, "upload chunk")

        await self._verify_hash(session, data)

        expected_length = session.expected_chunk_length(data.chunk_index)
        if len(data.content) != expected_length:
            raise InvalidChunkSize(session.upload_id, data.chunk_index, expected_length, len(data.content))

        if not await self._store.reserve_chunk(session.upload_id, data.chunk_index):
            raise await self._reservation_error(session.upload_id, data.chunk_index)

        try:
            await self._staging.write_chunk(session.upload_id, data.chunk_index, data.content)
        except StorageWriteFailed:
            await self._store.release_chunk(session.upload_id, data.chunk_index)
            raise

        updated = await self._store.commit_chunk(session.upload_id, data.chunk_index)
        if updated is None:
            # Session was aborted, expired or removed while the chunk was written
            await self._staging.discard_chunk(session.upload_id, data.chunk_index)
            current = await self._store.get(session.upload_id)
            if current is None:
                raise UploadSessionNotFound(session.upload_id)
            raise _state_error(current)

        logger.debug(
            f"Accepted chunk {data.chunk_index} for upload {session.upload_id} "
            f"({updated.received_count}/{updated.total_chunks})"
        )
        return SubmitChunkResult(
            upload_id=updated.upload_id,
            chunk_index=data.chunk_index,
            received_chunks=updated.received_count,
            total_chunks=updated.total_chunks,
            status=updated.status,
        )

    async def _verify_hash(self, session: UploadSession, data: SubmitChunkData) -> None:
        actual = Checksum.from_content(data.content)
        actual_hash = actual.value
        expected_hash = data.chunk_hash or ""
        if Checksum.is_valid(expected_hash) and actual.matches(Checksum(expected_hash)):
            return

        logger.warning(
            f"Chunk hash mismatch on upload {session.upload_id} chunk {data.chunk_index} "
            f"from user {data.user_id}"
        )
        await self._audit.security_alert(
            user_id=data.user_id,
            entity_type="upload_session",
            entity_id=session.upload_id,
            reason="chunk_hash_mismatch",
            chunk_index=data.chunk_index,
            expected_hash=expected_hash,
            actual_hash=actual_hash,
            received_bytes=len(data.content),
        )
        raise ChunkHashMismatch(session.upload_id, data.chunk_index, expected_hash, actual_hash)

    async def _reservation_error(self, upload_id: str, chunk_index: int) -> Exception:
        current = await self._store.get(upload_id)
        if current is None:
            return UploadSessionNotFound(upload_id)
        if chunk_index in current.received_chunks:
            return ChunkAlreadyUploaded(upload_id, chunk_index)
        if not current.status.accepts_chunks:
            return _state_error(current)
        return ChunkAlreadyUploaded(upload_id, chunk_index)


def _state_error(current: UploadSession) -> Exception:
    if current.status is UploadStatus.EXPIRED:
        return SessionExpired(current.upload_id, current.expires_at)
    return InvalidUploadState(current.upload_id, current.status, "upload chunk")


def create_submit_chunk_command(
    store: UploadSessionStore,
    staging: ChunkStagingArea,
    guard: SessionGuard,
    audit: AuditRecorder,
) -> SubmitChunkCommand:
    """Create submit chunk command."""
    return SubmitChunkCommand(store, staging, guard, audit)
