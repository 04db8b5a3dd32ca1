"""Local filesystem chunk staging.

Layout: ``<root>/<upload_id>/chunk_<index>.part`` plus an assembly
workspace in the same directory. Chunks are written to a temporary name
and renamed into place, so a crashed write leaves nothing that looks
like a staged chunk.
"""

import asyncio
import logging
import os
import shutil
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

import aiofiles
import aiofiles.os

from ...core.exceptions import StorageWriteFailed
from ...core.value_objects import UploadSessionId

logger = logging.getLogger(__name__)


class LocalChunkStaging:
    """Chunk staging area on a local directory."""

    def __init__(self, root: Union[str, Path]):
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _upload_dir(self, upload_id: str) -> Path:
        # Only well-formed ids ever become directory names
        if not UploadSessionId.is_valid(upload_id):
            raise ValueError(f"Refusing to stage data for malformed upload id {upload_id!r}")
        return self._root / upload_id

    def chunk_path(self, upload_id: str, chunk_index: int) -> Path:
        return self._upload_dir(upload_id) / f"chunk_{chunk_index:06d}.part"

    async def write_chunk(self, upload_id: str, chunk_index: int, data: bytes) -> None:
        upload_dir = self._upload_dir(upload_id)
        final_path = self.chunk_path(upload_id, chunk_index)
        temp_path = upload_dir / f".chunk_{chunk_index:06d}.{secrets.token_hex(4)}.tmp"
        try:
            await aiofiles.os.makedirs(upload_dir, exist_ok=True)
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(temp_path, final_path)
        except OSError as e:
            await self._remove_quietly(temp_path)
            logger.error(f"Failed to stage chunk {chunk_index} for upload {upload_id}: {e}")
            raise StorageWriteFailed(
                f"Failed to stage chunk {chunk_index}", reason=str(e)
            ) from e
        logger.debug(f"Staged chunk {chunk_index} for upload {upload_id}: {len(data)} bytes")

    async def discard_chunk(self, upload_id: str, chunk_index: int) -> None:
        await self._remove_quietly(self.chunk_path(upload_id, chunk_index))

    async def workspace(self, upload_id: str) -> Path:
        upload_dir = self._upload_dir(upload_id)
        await aiofiles.os.makedirs(upload_dir, exist_ok=True)
        return upload_dir

    async def discard(self, upload_id: str) -> None:
        upload_dir = self._upload_dir(upload_id)
        if await aiofiles.os.path.exists(upload_dir):
            await asyncio.to_thread(shutil.rmtree, upload_dir)
            logger.info(f"Cleaned up staged data for upload {upload_id}")

    async def list_upload_ids(self) -> List[str]:
        if not await aiofiles.os.path.isdir(self._root):
            return []
        entries = await aiofiles.os.listdir(self._root)
        return [name for name in entries if UploadSessionId.is_valid(name)]

    async def last_modified(self, upload_id: str) -> Optional[datetime]:
        upload_dir = self._upload_dir(upload_id)
        try:
            latest = await asyncio.to_thread(_latest_mtime, upload_dir)
        except FileNotFoundError:
            return None
        return datetime.fromtimestamp(latest, tz=timezone.utc)

    @staticmethod
    async def _remove_quietly(path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass


def _latest_mtime(directory: Path) -> float:
    latest = os.stat(directory).st_mtime
    for entry in os.scandir(directory):
        latest = max(latest, entry.stat().st_mtime)
    return latest
