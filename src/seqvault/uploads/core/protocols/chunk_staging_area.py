"""Chunk staging area protocol.

ONLY staging contract - temporary storage of chunk bytes, partitioned per
upload id, until assembly or cleanup.

Following maximum separation architecture - one file = one purpose.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ChunkStagingArea(Protocol):
    """Chunk staging area protocol."""

    async def write_chunk(self, upload_id: str, chunk_index: int, data: bytes) -> None:
        """Stage one chunk. A partially written chunk is never visible."""
        ...

    def chunk_path(self, upload_id: str, chunk_index: int) -> Path:
        """Location of a staged chunk."""
        ...

    async def discard_chunk(self, upload_id: str, chunk_index: int) -> None:
        """Remove one staged chunk if present."""
        ...

    async def workspace(self, upload_id: str) -> Path:
        """Per-upload scratch directory for assembly, created on demand."""
        ...

    async def discard(self, upload_id: str) -> None:
        """Remove every staged byte belonging to ``upload_id``."""
        ...

    async def list_upload_ids(self) -> List[str]:
        """Upload ids that currently own staged data."""
        ...

    async def last_modified(self, upload_id: str) -> Optional[datetime]:
        """Most recent write time of an upload's staged data."""
        ...
