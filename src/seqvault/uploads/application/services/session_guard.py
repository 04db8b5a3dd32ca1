"""Session guard.

ONLY session access rules shared by every session operation - id shape,
existence, ownership and lazy expiry - plus best-effort reclamation of a
session's staged data.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from datetime import datetime
from typing import Callable

from ....utils.datetime import utc_now
from ...core.entities import UploadSession
from ...core.exceptions import SessionExpired, UploadForbidden, UploadSessionNotFound
from ...core.protocols import ChunkStagingArea, UploadSessionStore
from ...core.value_objects import UploadSessionId, UploadStatus

logger = logging.getLogger(__name__)

# States lazy expiry may move to EXPIRED; a finalize in flight is left alone
EXPIRABLE_STATUSES = frozenset({
    UploadStatus.INITIATED,
    UploadStatus.UPLOADING,
    UploadStatus.ALL_CHUNKS_UPLOADED,
})


class SessionGuard:
    """Loads sessions on behalf of a caller and enforces expiry."""

    def __init__(
        self,
        store: UploadSessionStore,
        staging: ChunkStagingArea,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._staging = staging
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    async def load_owned(self, upload_id: str, user_id: str) -> UploadSession:
        """Fetch a session the caller owns.

        Raises:
            UploadSessionNotFound: If the id is malformed or unknown
            UploadForbidden: If another user owns the session
        """
        if not UploadSessionId.is_valid(upload_id):
            raise UploadSessionNotFound(upload_id)
        session = await self._store.get(upload_id)
        if session is None:
            raise UploadSessionNotFound(upload_id)
        if not session.is_owned_by(user_id):
            logger.warning(f"User {user_id} attempted to access upload session {upload_id}")
            raise UploadForbidden.for_session(upload_id)
        return session

    async def ensure_not_expired(self, session: UploadSession) -> None:
        """Apply lazy expiry.

        A stale session moves to EXPIRED and loses its staged data; the
        EXPIRED record stays until swept so later calls keep failing.

        Raises:
            SessionExpired: If the session is or just became expired
        """
        if session.status is UploadStatus.EXPIRED:
            raise SessionExpired(session.upload_id, session.expires_at)

        if session.status not in EXPIRABLE_STATUSES or not session.is_expired(self.now()):
            return

        expired = await self._store.transition(session.upload_id, EXPIRABLE_STATUSES, UploadStatus.EXPIRED)
        if expired is not None:
            logger.info(f"Upload session {session.upload_id} expired at {session.expires_at.isoformat()}")
            await self.discard_staged(session.upload_id)
        raise SessionExpired(session.upload_id, session.expires_at)

    async def discard_staged(self, upload_id: str) -> None:
        """Remove staged data; failures are logged, never raised."""
        try:
            await self._staging.discard(upload_id)
        except OSError as e:
            logger.error(f"Failed to discard staged data for upload {upload_id}: {e}")

    async def forget(self, upload_id: str) -> None:
        """Remove staged data and the session record, best effort."""
        await self.discard_staged(upload_id)
        try:
            await self._store.delete(upload_id)
        except Exception as e:
            logger.error(f"Failed to delete upload session {upload_id}: {e}")
