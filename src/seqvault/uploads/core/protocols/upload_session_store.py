"""Upload session store protocol.

ONLY session persistence contract - the working-set store for in-flight
upload sessions. Every mutating operation is atomic so the state machine
never relies on read-then-write sequences.

Following maximum separation architecture - one file = one purpose.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from ..entities import UploadSession
from ..value_objects import UploadStatus


@runtime_checkable
class UploadSessionStore(Protocol):
    """Upload session store protocol.

    Implementations may live in process memory or a shared cache. Returned
    sessions are snapshots; mutating them has no effect on the store.
    """

    async def create(self, session: UploadSession) -> None:
        """Persist a new session."""
        ...

    async def get(self, upload_id: str) -> Optional[UploadSession]:
        """Fetch a snapshot of a session, None when unknown."""
        ...

    async def delete(self, upload_id: str) -> bool:
        """Remove a session. Returns True when something was removed."""
        ...

    async def reserve_chunk(self, upload_id: str, chunk_index: int) -> bool:
        """Atomically claim ``chunk_index`` for writing.

        Returns False when the index is already received or reserved by a
        concurrent submission, or the session no longer exists.
        """
        ...

    async def release_chunk(self, upload_id: str, chunk_index: int) -> None:
        """Drop a reservation after a failed write."""
        ...

    async def commit_chunk(self, upload_id: str, chunk_index: int) -> Optional[UploadSession]:
        """Atomically move a reserved index into the received set.

        Advances the status to UPLOADING, or ALL_CHUNKS_UPLOADED once every
        index is present. Only legal while the session accepts chunks;
        returns None otherwise (session gone, or changed status meanwhile).
        """
        ...

    async def transition(
        self,
        upload_id: str,
        from_statuses: Iterable[UploadStatus],
        to_status: UploadStatus,
    ) -> Optional[UploadSession]:
        """Compare-and-swap the status.

        Returns the updated session when the current status was one of
        ``from_statuses`` and the status table allows the move to
        ``to_status``, None otherwise.
        """
        ...

    async def sweep_expired(self, now: datetime) -> List[UploadSession]:
        """Remove and return every session whose expiry has passed.

        Sessions being finalized (PROCESSING) are left alone.
        """
        ...

    async def list_upload_ids(self) -> List[str]:
        """Ids of every session currently held."""
        ...
