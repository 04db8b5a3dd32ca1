"""Local filesystem storage provider.

Durable storage under a root directory, addressed by StorageKey. Writes
go to a temporary sibling and are renamed into place.
"""

import logging
import secrets
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

from ...core.exceptions import StorageWriteFailed
from ...core.value_objects import StorageKey

logger = logging.getLogger(__name__)

COPY_BLOCK_SIZE = 1024 * 1024


class LocalStorageProvider:
    """Storage provider on a local directory."""

    def __init__(self, root: Union[str, Path]):
        self._root = Path(root)

    def path_for(self, storage_key: StorageKey) -> Path:
        path = (self._root / storage_key.value).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise ValueError(f"Storage key escapes storage root: {storage_key}")
        return path

    async def put_file(
        self,
        storage_key: StorageKey,
        source_path: Path,
        content_type: Optional[str] = None,
    ) -> StorageKey:
        target = self.path_for(storage_key)
        temp = target.with_name(f".{target.name}.{secrets.token_hex(4)}.tmp")
        written = 0
        try:
            await aiofiles.os.makedirs(target.parent, exist_ok=True)
            async with aiofiles.open(source_path, "rb") as src, aiofiles.open(temp, "wb") as dst:
                while True:
                    block = await src.read(COPY_BLOCK_SIZE)
                    if not block:
                        break
                    await dst.write(block)
                    written += len(block)
            await aiofiles.os.replace(temp, target)
        except OSError as e:
            await self._remove_quietly(temp)
            logger.error(f"Failed to store {storage_key}: {e}")
            raise StorageWriteFailed("Failed to write file to storage", str(storage_key), str(e)) from e
        logger.info(f"Stored {written} bytes at {storage_key}")
        return storage_key

    async def delete(self, storage_key: StorageKey) -> bool:
        try:
            await aiofiles.os.remove(self.path_for(storage_key))
        except FileNotFoundError:
            return False
        logger.info(f"Deleted {storage_key}")
        return True

    async def exists(self, storage_key: StorageKey) -> bool:
        return await aiofiles.os.path.exists(self.path_for(storage_key))

    @staticmethod
    async def _remove_quietly(path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
