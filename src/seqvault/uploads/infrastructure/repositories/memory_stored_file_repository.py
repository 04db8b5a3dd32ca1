"""In-memory stored file repository.

Keeps the content-hash uniqueness constraint the database enforces, so
dedup races behave the same in tests and single-process deployments.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from ...core.entities import StoredFile
from ...core.exceptions import DuplicateContentHash

logger = logging.getLogger(__name__)


class MemoryStoredFileRepository:
    """Stored file repository backed by dicts."""

    def __init__(self):
        self._by_id: Dict[str, StoredFile] = {}
        self._by_hash: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get_by_hash(self, content_hash: str) -> Optional[StoredFile]:
        async with self._lock:
            file_id = self._by_hash.get(content_hash.lower())
            return self._by_id.get(file_id) if file_id else None

    async def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        async with self._lock:
            return self._by_id.get(file_id)

    async def create(self, stored_file: StoredFile) -> StoredFile:
        content_hash = stored_file.content_hash.lower()
        async with self._lock:
            if content_hash in self._by_hash:
                raise DuplicateContentHash(content_hash)
            self._by_id[stored_file.file_id] = stored_file
            self._by_hash[content_hash] = stored_file.file_id
        logger.info(f"Created stored file {stored_file.file_id} ({stored_file.storage_key})")
        return stored_file

    async def list_all(self) -> List[StoredFile]:
        async with self._lock:
            return list(self._by_id.values())
