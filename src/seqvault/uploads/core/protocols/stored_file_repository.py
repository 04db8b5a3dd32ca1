"""Stored file repository protocol.

ONLY stored file metadata contract - lookup by content hash and creation
under a globally unique hash.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Optional, Protocol, runtime_checkable

from ..entities import StoredFile


@runtime_checkable
class StoredFileRepository(Protocol):
    """Stored file repository protocol."""

    async def get_by_hash(self, content_hash: str) -> Optional[StoredFile]:
        """Find the stored file with this content hash."""
        ...

    async def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        """Find a stored file by id."""
        ...

    async def create(self, stored_file: StoredFile) -> StoredFile:
        """Insert a new stored file.

        Raises:
            DuplicateContentHash: If another file already has this hash
        """
        ...
