"""Tests for the local filesystem storage provider and chunk staging."""

import pytest

from seqvault.uploads.core.exceptions import StorageWriteFailed
from seqvault.uploads.core.protocols import ChunkStagingArea, StorageProvider
from seqvault.uploads.core.value_objects import StorageKey, UploadSessionId
from seqvault.uploads.infrastructure.repositories import StaticProductOwnershipChecker
from seqvault.uploads.infrastructure.storage import LocalChunkStaging, LocalStorageProvider


@pytest.fixture
def provider(tmp_path):
    return LocalStorageProvider(tmp_path / "storage")


@pytest.fixture
def chunk_staging(tmp_path):
    return LocalChunkStaging(tmp_path / "staging")


class TestLocalStorageProvider:
    """Durable writes, existence checks and deletes."""

    def test_satisfies_protocol(self, provider):
        assert isinstance(provider, StorageProvider)

    @pytest.mark.asyncio
    async def test_put_file_copies_content(self, provider, tmp_path):
        source = tmp_path / "assembled.bin"
        source.write_bytes(b"PSEQ" + b"\x00" * 5000)
        key = StorageKey("rendered/1-abc-show.fseq")

        stored = await provider.put_file(key, source)

        assert stored == key
        assert await provider.exists(key)
        assert provider.path_for(key).read_bytes() == source.read_bytes()
        # No temporary siblings left behind
        assert [p.name for p in provider.path_for(key).parent.iterdir()] == ["1-abc-show.fseq"]

    @pytest.mark.asyncio
    async def test_delete(self, provider, tmp_path):
        source = tmp_path / "a.bin"
        source.write_bytes(b"x")
        key = StorageKey("asset/1-abc-a.png")
        await provider.put_file(key, source)

        assert await provider.delete(key) is True
        assert not await provider.exists(key)
        assert await provider.delete(key) is False

    @pytest.mark.asyncio
    async def test_missing_source_raises_storage_write_failed(self, provider, tmp_path):
        key = StorageKey("rendered/1-abc-show.fseq")

        with pytest.raises(StorageWriteFailed) as exc_info:
            await provider.put_file(key, tmp_path / "missing.bin")

        assert exc_info.value.details["storage_key"] == key.value
        assert not await provider.exists(key)


class TestLocalChunkStaging:
    """Per-upload staging directories."""

    def test_satisfies_protocol(self, chunk_staging):
        assert isinstance(chunk_staging, ChunkStagingArea)

    @pytest.mark.parametrize("upload_id", ["../escape", "upl_short", ""])
    def test_malformed_upload_id_rejected(self, chunk_staging, upload_id):
        with pytest.raises(ValueError):
            chunk_staging.chunk_path(upload_id, 0)

    @pytest.mark.asyncio
    async def test_write_discard_and_list(self, chunk_staging):
        upload_id = UploadSessionId.generate().value

        await chunk_staging.write_chunk(upload_id, 0, b"first")
        await chunk_staging.write_chunk(upload_id, 1, b"second")

        assert chunk_staging.chunk_path(upload_id, 1).read_bytes() == b"second"
        assert await chunk_staging.list_upload_ids() == [upload_id]
        assert await chunk_staging.last_modified(upload_id) is not None

        await chunk_staging.discard_chunk(upload_id, 1)
        assert not chunk_staging.chunk_path(upload_id, 1).exists()

        await chunk_staging.discard(upload_id)
        assert await chunk_staging.list_upload_ids() == []
        assert await chunk_staging.last_modified(upload_id) is None

    @pytest.mark.asyncio
    async def test_foreign_directories_are_not_listed(self, chunk_staging):
        (chunk_staging.root / "lost+found").mkdir(parents=True)

        assert await chunk_staging.list_upload_ids() == []


class TestStaticProductOwnershipChecker:
    """In-memory ownership lookups."""

    @pytest.mark.asyncio
    async def test_register_and_lookup(self):
        checker = StaticProductOwnershipChecker()
        checker.register("product-9", "user-1")

        assert await checker.is_owner("user-1", "product-9")
        assert not await checker.is_owner("user-2", "product-9")
        assert not await checker.is_owner("user-1", "product-unknown")
