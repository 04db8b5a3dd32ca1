"""Tests for the asyncpg and Redis adapters against mocked clients."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from seqvault.core.exceptions import ServiceUnavailableError
from seqvault.uploads.core.entities import StoredFile, UploadSession
from seqvault.uploads.core.exceptions import DuplicateContentHash
from seqvault.uploads.core.value_objects import FileCategory, FileId, UploadStatus
from seqvault.uploads.infrastructure.repositories import (
    AsyncpgProductOwnershipChecker,
    AsyncpgStoredFileRepository,
    RedisUploadSessionStore,
)

CONTENT_HASH = "ab" * 32


@pytest.fixture
def mock_pool():
    """Mock asyncpg pool for testing."""
    pool = AsyncMock()
    pool.fetchrow = AsyncMock()
    return pool


@pytest.fixture
def stored_file():
    return StoredFile(
        file_id=FileId.generate().value,
        file_name="show.fseq",
        original_name="show.fseq",
        category=FileCategory.RENDERED,
        size_bytes=4096,
        content_hash=CONTENT_HASH,
        storage_key="rendered/1700000000000-0123456789abcdef-show.fseq",
        mime_type="application/octet-stream",
        created_by="user-1",
    )


def row_for(stored: StoredFile, metadata='{"kind": "none"}'):
    return {
        "id": UUID(stored.file_id),
        "file_name": stored.file_name,
        "original_name": stored.original_name,
        "category": stored.category.value,
        "size_bytes": stored.size_bytes,
        "content_hash": stored.content_hash,
        "storage_key": stored.storage_key,
        "mime_type": stored.mime_type,
        "metadata": metadata,
        "product_id": None,
        "version_id": None,
        "created_by": stored.created_by,
        "created_at": stored.created_at,
    }


class TestAsyncpgStoredFileRepository:
    """Query construction and row mapping."""

    @pytest.mark.asyncio
    async def test_create_maps_returned_row(self, mock_pool, stored_file):
        mock_pool.fetchrow.return_value = row_for(stored_file)
        repository = AsyncpgStoredFileRepository(mock_pool, schema="catalog")

        created = await repository.create(stored_file)

        assert created == stored_file
        query = mock_pool.fetchrow.call_args.args[0]
        assert "catalog.stored_files" in query
        assert "ON CONFLICT" in query

    @pytest.mark.asyncio
    async def test_conflicting_insert_is_duplicate(self, mock_pool, stored_file):
        mock_pool.fetchrow.return_value = None
        repository = AsyncpgStoredFileRepository(mock_pool)

        with pytest.raises(DuplicateContentHash):
            await repository.create(stored_file)

    @pytest.mark.asyncio
    async def test_get_by_hash_decodes_metadata(self, mock_pool, stored_file):
        metadata = {"kind": "xsq", "model_count": 4, "effect_count": 9}
        mock_pool.fetchrow.return_value = row_for(stored_file, json.dumps(metadata))
        repository = AsyncpgStoredFileRepository(mock_pool)

        found = await repository.get_by_hash(CONTENT_HASH.upper())

        assert found.metadata.model_count == 4
        assert mock_pool.fetchrow.call_args.args[1] == CONTENT_HASH

    @pytest.mark.asyncio
    async def test_get_by_id(self, mock_pool, stored_file):
        mock_pool.fetchrow.return_value = row_for(stored_file)
        repository = AsyncpgStoredFileRepository(mock_pool)

        found = await repository.get_by_id(stored_file.file_id)

        assert found.file_id == stored_file.file_id
        assert mock_pool.fetchrow.call_args.args[1] == UUID(stored_file.file_id)

    @pytest.mark.asyncio
    async def test_get_by_id_with_malformed_id_skips_query(self, mock_pool):
        repository = AsyncpgStoredFileRepository(mock_pool)

        assert await repository.get_by_id("not-a-uuid") is None
        mock_pool.fetchrow.assert_not_called()

    @pytest.mark.asyncio
    async def test_product_ownership_lookup(self, mock_pool):
        checker = AsyncpgProductOwnershipChecker(mock_pool)

        mock_pool.fetchrow.return_value = {"id": "product-1"}
        assert await checker.is_owner("user-1", "product-1")

        mock_pool.fetchrow.return_value = None
        assert not await checker.is_owner("user-2", "product-1")


class TestRedisUploadSessionStore:
    """Key layout, script results and error wrapping."""

    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.eval = AsyncMock()
        client.expire = AsyncMock()
        client.zrange = AsyncMock(return_value=[])
        return client

    @pytest.fixture
    def session(self):
        return UploadSession.create(
            owner_id="user-1",
            file_name="show.fseq",
            file_size=3000,
            mime_type="application/octet-stream",
            category=FileCategory.RENDERED,
            chunk_size=1024,
            ttl=timedelta(hours=1),
        )

    @pytest.mark.asyncio
    async def test_reserve_uses_script_result(self, redis_client):
        store = RedisUploadSessionStore(redis_client, key_prefix="t:")
        redis_client.eval.return_value = 1

        assert await store.reserve_chunk("upl_x", 2)
        args = redis_client.eval.call_args.args
        assert args[1:5] == (3, "t:upl_x", "t:upl_x:received", "t:upl_x:reserved")
        assert args[5] == "2"
        redis_client.expire.assert_awaited_once()

        redis_client.eval.return_value = 0
        assert not await store.reserve_chunk("upl_x", 2)

    @pytest.mark.asyncio
    async def test_get_hydrates_session(self, redis_client, session):
        payload = session.to_dict()
        payload.pop("received_chunks")
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[
            {"data": json.dumps(payload), "status": UploadStatus.UPLOADING.value},
            {"0", "2"},
        ])
        redis_client.pipeline.return_value = pipe
        store = RedisUploadSessionStore(redis_client)

        loaded = await store.get(session.upload_id)

        assert loaded.status is UploadStatus.UPLOADING
        assert loaded.received_chunks == {0, 2}
        assert loaded.missing_chunks() == [1]

    @pytest.mark.asyncio
    async def test_transition_miss_returns_none(self, redis_client):
        redis_client.eval.return_value = 0
        store = RedisUploadSessionStore(redis_client)

        assert await store.transition("upl_x", [UploadStatus.ALL_CHUNKS_UPLOADED], UploadStatus.PROCESSING) is None

    @pytest.mark.asyncio
    async def test_transition_filters_illegal_sources(self, redis_client):
        redis_client.eval.return_value = 0
        store = RedisUploadSessionStore(redis_client, key_prefix="t:")

        assert await store.transition("upl_x", [UploadStatus.PROCESSING], UploadStatus.ABORTED) is None
        redis_client.eval.assert_not_called()

        await store.transition(
            "upl_x", [UploadStatus.UPLOADING, UploadStatus.COMPLETED], UploadStatus.EXPIRED
        )
        args = redis_client.eval.call_args.args
        assert args[2:] == ("t:upl_x", "expired", "uploading")

    @pytest.mark.asyncio
    async def test_redis_outage_is_service_unavailable(self, redis_client):
        redis_client.eval.side_effect = RedisConnectionError("connection refused")
        store = RedisUploadSessionStore(redis_client)

        with pytest.raises(ServiceUnavailableError):
            await store.reserve_chunk("upl_x", 0)
