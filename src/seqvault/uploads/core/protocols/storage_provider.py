"""Storage provider protocol.

ONLY durable storage contract - where committed files live.

Following maximum separation architecture - one file = one purpose.
"""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from ..value_objects import StorageKey


@runtime_checkable
class StorageProvider(Protocol):
    """Durable object storage protocol."""

    async def put_file(
        self,
        storage_key: StorageKey,
        source_path: Path,
        content_type: Optional[str] = None,
    ) -> StorageKey:
        """Store the contents of a local file under ``storage_key``.

        Raises:
            StorageWriteFailed: If the backend cannot write
        """
        ...

    async def delete(self, storage_key: StorageKey) -> bool:
        """Delete an object. Returns True when it existed."""
        ...

    async def exists(self, storage_key: StorageKey) -> bool:
        """Check whether an object exists."""
        ...
