"""Tests for finalizing chunked uploads."""

import asyncio
from datetime import timedelta

import pytest

from conftest import CHUNK_SIZE, INTRUDER, OWNER, FailingAuditSink, fseq_bytes, sha256
from seqvault.uploads.application.commands import CompleteUploadResult
from seqvault.uploads.application.services import MetadataExtractor
from seqvault.uploads.application.services.upload_coordinator import create_upload_coordinator
from seqvault.uploads.core.exceptions import (
    IncompleteUpload,
    IntegrityCheckFailed,
    InvalidUploadState,
    StorageWriteFailed,
    UploadSessionNotFound,
)
from seqvault.uploads.core.protocols import AuditAction
from seqvault.uploads.core.value_objects import FseqMetadata, StorageKey


class BrokenMetadataExtractor(MetadataExtractor):
    """Extractor with a parser bug."""

    async def extract(self, path, category, header=b""):
        raise RuntimeError("parser bug")


class TestCompleteUpload:
    """Assembly, verification and durable commit."""

    @pytest.mark.asyncio
    async def test_complete_stores_file_and_cleans_up(
        self, coordinator, upload_chunks, repository, storage, staging, session_store
    ):
        content = fseq_bytes(3 * CHUNK_SIZE + 17)
        initiated = await upload_chunks(content, product_id="product-1", version_id="v1")

        result = await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert result.deduplicated is False
        assert result.content_hash == sha256(content)
        assert result.storage_key.startswith("rendered/")
        stored = await repository.get_by_id(result.file_id)
        assert stored.product_id == "product-1"
        assert stored.version_id == "v1"
        assert stored.created_by == OWNER
        assert storage.path_for(StorageKey(result.storage_key)).read_bytes() == content
        assert storage.put_file_calls == 1
        assert await session_store.get(initiated.upload_id) is None
        assert await staging.list_upload_ids() == []

    @pytest.mark.asyncio
    async def test_rendered_metadata_extracted(self, coordinator, upload_chunks):
        content = fseq_bytes(2 * CHUNK_SIZE, channels=512, frames=1200, step_ms=50)
        initiated = await upload_chunks(content)

        result = await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert isinstance(result.metadata, FseqMetadata)
        assert result.metadata.channel_count == 512
        assert result.metadata.frame_count == 1200
        assert result.metadata.fps == 20
        assert result.metadata.sequence_length_seconds == 60.0

    @pytest.mark.asyncio
    async def test_incomplete_upload_rejected(self, coordinator, session_store):
        content = fseq_bytes(3 * CHUNK_SIZE)
        initiated = await coordinator.initiate(
            OWNER, "show.fseq", len(content), "application/octet-stream", "RENDERED"
        )
        for index in (0, 2):
            part = content[index * CHUNK_SIZE:(index + 1) * CHUNK_SIZE]
            await coordinator.submit_chunk(initiated.upload_id, OWNER, index, sha256(part), part)

        with pytest.raises(IncompleteUpload) as exc_info:
            await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert exc_info.value.error_code == "INCOMPLETE_UPLOAD"
        assert exc_info.value.details["missing_chunks"] == [1]
        session = await session_store.get(initiated.upload_id)
        assert session.received_chunks == {0, 2}

    @pytest.mark.asyncio
    async def test_identical_content_deduplicated(self, coordinator, upload_chunks, repository, storage, audit_sink):
        content = fseq_bytes(2 * CHUNK_SIZE + 5)
        first = await upload_chunks(content, file_name="show.fseq", user_id=OWNER)
        first_result = await coordinator.complete_upload(first.upload_id, OWNER)

        second = await upload_chunks(content, file_name="copy.fseq", user_id=INTRUDER)
        second_result = await coordinator.complete_upload(second.upload_id, INTRUDER)

        assert first_result.deduplicated is False
        assert second_result.deduplicated is True
        assert second_result.file_id == first_result.file_id
        assert len(await repository.list_all()) == 1
        assert storage.put_file_calls == 1

        stored_events = [
            e for e in audit_sink.of(AuditAction.FILE_UPLOADED) if e.entity_type == "product_file"
        ]
        assert [e.metadata["deduplicated"] for e in stored_events] == [False, True]

    @pytest.mark.asyncio
    async def test_concurrent_complete_finalizes_once(self, coordinator, upload_chunks, repository, storage):
        content = fseq_bytes(2 * CHUNK_SIZE)
        initiated = await upload_chunks(content)

        results = await asyncio.gather(
            coordinator.complete_upload(initiated.upload_id, OWNER),
            coordinator.complete_upload(initiated.upload_id, OWNER),
            return_exceptions=True,
        )

        succeeded = [r for r in results if isinstance(r, CompleteUploadResult)]
        failed = [r for r in results if not isinstance(r, CompleteUploadResult)]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], InvalidUploadState)
        assert failed[0].error_code == "INVALID_STATE"
        assert len(await repository.list_all()) == 1
        assert storage.put_file_calls == 1

    @pytest.mark.asyncio
    async def test_complete_twice_sequentially(self, coordinator, upload_chunks):
        content = fseq_bytes(CHUNK_SIZE)
        initiated = await upload_chunks(content)
        await coordinator.complete_upload(initiated.upload_id, OWNER)

        with pytest.raises(UploadSessionNotFound):
            await coordinator.complete_upload(initiated.upload_id, OWNER)

    @pytest.mark.asyncio
    async def test_integrity_failure_rejects_and_cleans_up(
        self, coordinator, upload_chunks, storage, staging, session_store, audit_sink, repository
    ):
        content = b"MZ" + b"\x00" * (2 * CHUNK_SIZE - 2)
        initiated = await upload_chunks(content, file_name="fake.fseq")

        with pytest.raises(IntegrityCheckFailed) as exc_info:
            await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert exc_info.value.error_code == "INTEGRITY_CHECK_FAILED"
        assert storage.put_file_calls == 0
        assert await repository.list_all() == []
        assert await session_store.get(initiated.upload_id) is None
        assert await staging.list_upload_ids() == []

        alerts = audit_sink.of(AuditAction.SECURITY_ALERT)
        assert [a.metadata["reason"] for a in alerts] == ["file_integrity_check_failed"]

    @pytest.mark.asyncio
    async def test_metadata_failure_does_not_fail_upload(self, coordinator, upload_chunks):
        content = fseq_bytes(CHUNK_SIZE, channels=0)
        initiated = await upload_chunks(content)

        result = await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert result.metadata.kind == "none"
        assert result.size_bytes == CHUNK_SIZE

    @pytest.mark.asyncio
    async def test_storage_failure_cleans_up(
        self, coordinator, upload_chunks, storage, staging, session_store, repository
    ):
        storage.fail_writes = True
        initiated = await upload_chunks(fseq_bytes(2 * CHUNK_SIZE))

        with pytest.raises(StorageWriteFailed):
            await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert await repository.list_all() == []
        assert await session_store.get(initiated.upload_id) is None
        assert await staging.list_upload_ids() == []

    @pytest.mark.asyncio
    async def test_audit_outage_does_not_fail_upload(self, session_store, staging, storage, repository, clock):
        coordinator = create_upload_coordinator(
            store=session_store,
            staging=staging,
            storage=storage,
            repository=repository,
            audit_sink=FailingAuditSink(),
            chunk_size=CHUNK_SIZE,
            session_ttl=timedelta(hours=1),
            clock=clock,
        )
        content = fseq_bytes(CHUNK_SIZE)
        initiated = await coordinator.initiate(
            OWNER, "show.fseq", len(content), "application/octet-stream", "RENDERED"
        )
        await coordinator.submit_chunk(initiated.upload_id, OWNER, 0, sha256(content), content)

        result = await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert result.deduplicated is False

    @pytest.mark.asyncio
    async def test_missing_staged_chunk_raises_security_alert(
        self, coordinator, upload_chunks, staging, session_store, audit_sink, storage
    ):
        initiated = await upload_chunks(fseq_bytes(2 * CHUNK_SIZE))
        staging.chunk_path(initiated.upload_id, 1).unlink()

        with pytest.raises(IntegrityCheckFailed):
            await coordinator.complete_upload(initiated.upload_id, OWNER)

        alerts = audit_sink.of(AuditAction.SECURITY_ALERT)
        assert [a.metadata["reason"] for a in alerts] == ["file_integrity_check_failed"]
        assert "staged chunk 1 is missing" in alerts[0].metadata["errors"][0]
        assert storage.put_file_calls == 0
        assert await session_store.get(initiated.upload_id) is None
        assert await staging.list_upload_ids() == []

    @pytest.mark.asyncio
    async def test_unexpected_extractor_error_completes_without_metadata(
        self, session_store, staging, storage, repository, audit_sink, clock
    ):
        coordinator = create_upload_coordinator(
            store=session_store,
            staging=staging,
            storage=storage,
            repository=repository,
            audit_sink=audit_sink,
            chunk_size=CHUNK_SIZE,
            metadata_extractor=BrokenMetadataExtractor(),
            clock=clock,
        )
        content = fseq_bytes(CHUNK_SIZE)
        initiated = await coordinator.initiate(
            OWNER, "show.fseq", len(content), "application/octet-stream", "RENDERED"
        )
        await coordinator.submit_chunk(initiated.upload_id, OWNER, 0, sha256(content), content)

        result = await coordinator.complete_upload(initiated.upload_id, OWNER)

        assert result.metadata.kind == "none"
        assert await repository.get_by_id(result.file_id) is not None
        assert audit_sink.of(AuditAction.SECURITY_ALERT) == []
        assert len(audit_sink.of(AuditAction.FILE_UPLOADED)) == 1
