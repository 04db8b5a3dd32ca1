"""Abort upload command.

ONLY upload cancellation - discards a session and its staged chunks at
the owner's request.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass

from ..services.audit_recorder import AuditRecorder
from ..services.session_guard import EXPIRABLE_STATUSES, SessionGuard
from ...core.exceptions import InvalidUploadState, UploadSessionNotFound
from ...core.protocols import UploadSessionStore
from ...core.value_objects import UploadStatus

logger = logging.getLogger(__name__)

DEFAULT_ABORT_REASON = "User aborted upload"


@dataclass
class AbortUploadData:
    """Data required to abort an upload."""

    upload_id: str
    user_id: str
    reason: str = DEFAULT_ABORT_REASON


@dataclass
class AbortUploadResult:
    """Acknowledgement of an abort."""

    upload_id: str
    received_chunks: int
    total_chunks: int
    aborted: bool = True


class AbortUploadCommand:
    """Command to abort an in-progress upload.

    A session being finalized cannot be aborted. An already expired
    session is simply cleaned up.
    """

    def __init__(self, store: UploadSessionStore, guard: SessionGuard, audit: AuditRecorder):
        self._store = store
        self._guard = guard
        self._audit = audit

    async def execute(self, data: AbortUploadData) -> AbortUploadResult:
        """Execute upload abort.

        Raises:
            UploadSessionNotFound, UploadForbidden, InvalidUploadState
        """
        session = await self._guard.load_owned(data.upload_id, data.user_id)

        if session.status is not UploadStatus.EXPIRED:
            aborted = await self._store.transition(
                session.upload_id, EXPIRABLE_STATUSES, UploadStatus.ABORTED
            )
            if aborted is None:
                current = await self._store.get(session.upload_id)
                if current is None:
                    raise UploadSessionNotFound(session.upload_id)
                if current.status is not UploadStatus.EXPIRED:
                    raise InvalidUploadState(session.upload_id, current.status, "abort upload")
            else:
                session = aborted

        await self._guard.forget(session.upload_id)

        logger.info(
            f"Aborted upload {session.upload_id} with "
            f"{session.received_count}/{session.total_chunks} chunks received"
        )
        await self._audit.file_deleted(
            user_id=data.user_id,
            entity_type="upload_session",
            entity_id=session.upload_id,
            metadata={
                "file_name": session.file_name,
                "uploaded_chunks": session.received_count,
                "total_chunks": session.total_chunks,
                "reason": data.reason,
            },
        )
        return AbortUploadResult(
            upload_id=session.upload_id,
            received_chunks=session.received_count,
            total_chunks=session.total_chunks,
        )


def create_abort_upload_command(
    store: UploadSessionStore,
    guard: SessionGuard,
    audit: AuditRecorder,
) -> AbortUploadCommand:
    """Create abort upload command."""
    return AbortUploadCommand(store, guard, audit)
