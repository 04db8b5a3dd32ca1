"""Complete upload command.

ONLY upload finalization - assembles a fully received session and commits
the result as a deduplicated stored file.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass

from ....core.exceptions import SeqVaultError
from ..services.audit_recorder import AuditRecorder
from ..services.file_assembler import AssembledFile, FileAssembler
from ..services.session_guard import SessionGuard
from ..services.stored_file_committer import CommitRequest, StoredFileCommitter
from ...core.entities import UploadSession
from ...core.exceptions import (
    IncompleteUpload,
    IntegrityCheckFailed,
    InvalidUploadState,
    UploadSessionNotFound,
)
from ...core.protocols import AuditSeverity, UploadSessionStore
from ...core.value_objects import FormatMetadata, UploadStatus

logger = logging.getLogger(__name__)


@dataclass
class CompleteUploadData:
    """Data required to finalize an upload."""

    upload_id: str
    user_id: str


@dataclass
class CompleteUploadResult:
    """Result of upload finalization."""

    file_id: str
    storage_key: str
    content_hash: str
    size_bytes: int
    metadata: FormatMetadata
    deduplicated: bool


class CompleteUploadCommand:
    """Command to finalize a chunked upload.

    The ALL_CHUNKS_UPLOADED -> PROCESSING compare-and-swap admits at most
    one finalize per session; a concurrent second call fails INVALID_STATE.
    Whatever happens after that point, staged data and the session record
    are released before returning.
    """

    def __init__(
        self,
        store: UploadSessionStore,
        guard: SessionGuard,
        assembler: FileAssembler,
        committer: StoredFileCommitter,
        audit: AuditRecorder,
    ):
        self._store = store
        self._guard = guard
        self._assembler = assembler
        self._committer = committer
        self._audit = audit

    async def execute(self, data: CompleteUploadData) -> CompleteUploadResult:
        """Execute upload finalization.

        Raises:
            UploadSessionNotFound, UploadForbidden, SessionExpired,
            IncompleteUpload, InvalidUploadState, IntegrityCheckFailed,
            StorageWriteFailed
        """
        session = await self._guard.load_owned(data.upload_id, data.user_id)
        await self._guard.ensure_not_expired(session)

        if session.received_count < session.total_chunks:
            raise IncompleteUpload(
                session.upload_id,
                session.received_count,
                session.total_chunks,
                session.missing_chunks(),
            )

        processing = await self._store.transition(
            session.upload_id, [UploadStatus.ALL_CHUNKS_UPLOADED], UploadStatus.PROCESSING
        )
        if processing is None:
            current = await self._store.get(session.upload_id)
            if current is None:
                raise UploadSessionNotFound(session.upload_id)
            raise InvalidUploadState(session.upload_id, current.status, "complete upload")

        logger.info(f"Finalizing upload {session.upload_id} ({session.file_size} bytes)")
        succeeded = False
        try:
            assembled = await self._assemble(processing, data.user_id)
            committed = await self._committer.commit(
                CommitRequest(
                    owner_id=processing.owner_id,
                    file_name=processing.file_name,
                    mime_type=processing.mime_type,
                    category=processing.category,
                    declared_size=processing.file_size,
                    upload_id=processing.upload_id,
                    product_id=processing.product_id,
                    version_id=processing.version_id,
                ),
                assembled,
            )
            succeeded = True
        except SeqVaultError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected failure finalizing upload {session.upload_id}")
            await self._audit.security_alert(
                user_id=data.user_id,
                entity_type="upload_session",
                entity_id=session.upload_id,
                reason="upload_error",
                severity=AuditSeverity.ERROR,
                error=str(e),
            )
            raise
        finally:
            if succeeded:
                await self._store.transition(
                    session.upload_id, [UploadStatus.PROCESSING], UploadStatus.COMPLETED
                )
            await self._guard.forget(session.upload_id)

        stored = committed.stored_file
        logger.info(
            f"Completed upload {session.upload_id} as file {stored.file_id} "
            f"(deduplicated={committed.deduplicated})"
        )
        return CompleteUploadResult(
            file_id=stored.file_id,
            storage_key=stored.storage_key,
            content_hash=stored.content_hash,
            size_bytes=stored.size_bytes,
            metadata=stored.metadata,
            deduplicated=committed.deduplicated,
        )

    async def _assemble(self, session: UploadSession, user_id: str) -> AssembledFile:
        try:
            return await self._assembler.assemble(session)
        except IntegrityCheckFailed as e:
            await self._audit.security_alert(
                user_id=user_id,
                entity_type="upload_session",
                entity_id=session.upload_id,
                reason="file_integrity_check_failed",
                file_name=session.file_name,
                category=session.category.value,
                errors=e.errors,
            )
            raise


def create_complete_upload_command(
    store: UploadSessionStore,
    guard: SessionGuard,
    assembler: FileAssembler,
    committer: StoredFileCommitter,
    audit: AuditRecorder,
) -> CompleteUploadCommand:
    """Create complete upload command."""
    return CompleteUploadCommand(store, guard, assembler, committer, audit)
