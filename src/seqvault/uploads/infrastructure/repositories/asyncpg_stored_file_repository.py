"""Stored file repository on PostgreSQL via asyncpg.

Uniqueness of ``content_hash`` is enforced by a unique index; the insert
uses ``ON CONFLICT DO NOTHING`` so a lost race surfaces as
DuplicateContentHash rather than a driver error.
"""

import json
import logging
from typing import Any, Mapping, Optional
from uuid import UUID

import asyncpg

from ....core.exceptions import ServiceUnavailableError
from ....utils.uuid import is_valid_uuid
from ...core.entities import StoredFile
from ...core.exceptions import DuplicateContentHash
from ...core.value_objects import FileCategory, metadata_from_dict
from ..queries import (
    STORED_FILES_CREATE_HASH_INDEX,
    STORED_FILES_CREATE_TABLE,
    STORED_FILE_GET_BY_HASH,
    STORED_FILE_GET_BY_ID,
    STORED_FILE_INSERT,
)

logger = logging.getLogger(__name__)


class AsyncpgStoredFileRepository:
    """Database repository for stored file metadata.

    Accepts an asyncpg pool and schema name via dependency injection.
    """

    def __init__(self, pool: asyncpg.Pool, schema: str = "public"):
        """Initialize with an asyncpg pool.

        Args:
            pool: asyncpg connection pool
            schema: Database schema name
        """
        self._pool = pool
        self._schema = schema

    async def ensure_schema(self) -> None:
        """Create the stored_files table and its hash index if missing."""
        async with self._pool.acquire() as conn:
            await conn.execute(STORED_FILES_CREATE_TABLE.format(schema=self._schema))
            await conn.execute(STORED_FILES_CREATE_HASH_INDEX.format(schema=self._schema))

    async def get_by_hash(self, content_hash: str) -> Optional[StoredFile]:
        query = STORED_FILE_GET_BY_HASH.format(schema=self._schema)
        try:
            row = await self._pool.fetchrow(query, content_hash.lower())
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to look up stored file by hash {content_hash}: {e}")
            raise ServiceUnavailableError(f"Stored file lookup failed: {e}") from e
        return self._map_row_to_stored_file(row) if row else None

    async def get_by_id(self, file_id: str) -> Optional[StoredFile]:
        if not is_valid_uuid(file_id):
            return None
        query = STORED_FILE_GET_BY_ID.format(schema=self._schema)
        try:
            row = await self._pool.fetchrow(query, UUID(file_id))
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to look up stored file {file_id}: {e}")
            raise ServiceUnavailableError(f"Stored file lookup failed: {e}") from e
        return self._map_row_to_stored_file(row) if row else None

    async def create(self, stored_file: StoredFile) -> StoredFile:
        query = STORED_FILE_INSERT.format(schema=self._schema)
        params = [
            UUID(stored_file.file_id), stored_file.file_name, stored_file.original_name,
            stored_file.category.value, stored_file.size_bytes, stored_file.content_hash.lower(),
            stored_file.storage_key, stored_file.mime_type, json.dumps(stored_file.metadata.to_dict()),
            stored_file.product_id, stored_file.version_id, stored_file.created_by,
            stored_file.created_at,
        ]
        try:
            row = await self._pool.fetchrow(query, *params)
        except asyncpg.UniqueViolationError as e:
            raise DuplicateContentHash(stored_file.content_hash) from e
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to create stored file {stored_file.file_id}: {e}")
            raise ServiceUnavailableError(f"Stored file insert failed: {e}") from e

        if row is None:
            raise DuplicateContentHash(stored_file.content_hash)

        logger.info(f"Created stored file {stored_file.file_id} with hash {stored_file.content_hash}")
        return self._map_row_to_stored_file(row)

    def _map_row_to_stored_file(self, row: Mapping[str, Any]) -> StoredFile:
        metadata = row["metadata"]
        if isinstance(metadata, str):
            metadata = json.loads(metadata)
        return StoredFile(
            file_id=str(row["id"]),
            file_name=row["file_name"],
            original_name=row["original_name"],
            category=FileCategory(row["category"]),
            size_bytes=row["size_bytes"],
            content_hash=row["content_hash"].strip(),
            storage_key=row["storage_key"],
            mime_type=row["mime_type"],
            metadata=metadata_from_dict(metadata),
            product_id=row["product_id"],
            version_id=row["version_id"],
            created_by=row["created_by"],
            created_at=row["created_at"],
        )
