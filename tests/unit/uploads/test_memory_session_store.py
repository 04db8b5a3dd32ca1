"""Tests for the in-memory session store's atomic operations."""

from datetime import timedelta

import pytest

from seqvault.uploads.core.entities import UploadSession
from seqvault.uploads.core.value_objects import FileCategory, UploadStatus
from seqvault.uploads.infrastructure.repositories import MemoryUploadSessionStore


@pytest.fixture
def store():
    return MemoryUploadSessionStore()


@pytest.fixture
def session(clock):
    return UploadSession.create(
        owner_id="user-1",
        file_name="show.fseq",
        file_size=2048,
        mime_type="application/octet-stream",
        category=FileCategory.RENDERED,
        chunk_size=1024,
        ttl=timedelta(hours=1),
        now=clock(),
    )


class TestMemoryUploadSessionStore:
    """Reserve and commit, compare-and-set and sweeping."""

    @pytest.mark.asyncio
    async def test_get_returns_copies(self, store, session):
        await store.create(session)

        loaded = await store.get(session.upload_id)
        loaded.received_chunks.add(0)

        assert (await store.get(session.upload_id)).received_chunks == set()

    @pytest.mark.asyncio
    async def test_reserve_is_exclusive(self, store, session):
        await store.create(session)

        assert await store.reserve_chunk(session.upload_id, 0)
        assert not await store.reserve_chunk(session.upload_id, 0)

        await store.release_chunk(session.upload_id, 0)
        assert await store.reserve_chunk(session.upload_id, 0)

    @pytest.mark.asyncio
    async def test_commit_records_chunk(self, store, session):
        await store.create(session)
        await store.reserve_chunk(session.upload_id, 0)
        await store.reserve_chunk(session.upload_id, 1)

        await store.commit_chunk(session.upload_id, 0)
        updated = await store.commit_chunk(session.upload_id, 1)

        assert updated.received_chunks == {0, 1}
        assert updated.status is UploadStatus.ALL_CHUNKS_UPLOADED
        assert not await store.reserve_chunk(session.upload_id, 0)

    @pytest.mark.asyncio
    async def test_commit_after_abort_is_refused(self, store, session):
        await store.create(session)
        await store.reserve_chunk(session.upload_id, 0)
        await store.transition(session.upload_id, [UploadStatus.INITIATED], UploadStatus.ABORTED)

        assert await store.commit_chunk(session.upload_id, 0) is None
        assert (await store.get(session.upload_id)).received_chunks == set()

    @pytest.mark.asyncio
    async def test_transition_is_compare_and_set(self, store, session):
        await store.create(session)

        assert await store.transition(
            session.upload_id, [UploadStatus.ALL_CHUNKS_UPLOADED], UploadStatus.PROCESSING
        ) is None
        aborted = await store.transition(session.upload_id, [UploadStatus.INITIATED], UploadStatus.ABORTED)
        assert aborted.status is UploadStatus.ABORTED
        assert await store.transition(session.upload_id, [UploadStatus.INITIATED], UploadStatus.EXPIRED) is None

    @pytest.mark.asyncio
    async def test_transition_outside_status_table_refused(self, store, session):
        await store.create(session)

        assert await store.transition(
            session.upload_id, [UploadStatus.INITIATED], UploadStatus.COMPLETED
        ) is None
        assert (await store.get(session.upload_id)).status is UploadStatus.INITIATED

        processing = await store.transition(
            session.upload_id, [UploadStatus.INITIATED], UploadStatus.PROCESSING
        )
        assert processing is None
        assert (await store.get(session.upload_id)).status is UploadStatus.INITIATED

    @pytest.mark.asyncio
    async def test_sweep_expired(self, store, session, clock):
        await store.create(session)

        assert await store.sweep_expired(clock()) == []
        clock.advance(hours=1)
        swept = await store.sweep_expired(clock())

        assert [s.upload_id for s in swept] == [session.upload_id]
        assert await store.list_upload_ids() == []

    @pytest.mark.asyncio
    async def test_duplicate_create_rejected(self, store, session):
        await store.create(session)

        with pytest.raises(ValueError):
            await store.create(session)
