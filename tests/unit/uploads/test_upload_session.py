"""Tests for the upload session entity and status machine."""

from datetime import datetime, timedelta, timezone

import pytest

from seqvault.uploads.core.entities import UploadSession, calculate_total_chunks
from seqvault.uploads.core.value_objects import FileCategory, UploadSessionId, UploadStatus

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_session(file_size=2560, chunk_size=1024):
    return UploadSession.create(
        owner_id="user-1",
        file_name="show.fseq",
        file_size=file_size,
        mime_type="application/octet-stream",
        category=FileCategory.RENDERED,
        chunk_size=chunk_size,
        ttl=timedelta(hours=24),
        now=NOW,
    )


class TestUploadSession:
    """Chunk bookkeeping and lifecycle."""

    @pytest.mark.parametrize("file_size,chunk_size,expected", [
        (1, 1024, 1),
        (1024, 1024, 1),
        (1025, 1024, 2),
        (2560, 1024, 3),
        (5 * 1024 * 1024, 5 * 1024 * 1024, 1),
    ])
    def test_total_chunks(self, file_size, chunk_size, expected):
        assert calculate_total_chunks(file_size, chunk_size) == expected

    def test_create(self):
        session = make_session()

        assert UploadSessionId.is_valid(session.upload_id)
        assert session.status is UploadStatus.INITIATED
        assert session.total_chunks == 3
        assert session.expires_at == NOW + timedelta(hours=24)

    def test_expected_chunk_lengths(self):
        session = make_session()

        assert [session.expected_chunk_length(i) for i in range(3)] == [1024, 1024, 512]

    def test_record_chunk_advances_status(self):
        session = make_session()

        session.record_chunk(1)
        assert session.status is UploadStatus.UPLOADING
        assert session.missing_chunks() == [0, 2]

        session.record_chunk(0)
        session.record_chunk(2)
        assert session.status is UploadStatus.ALL_CHUNKS_UPLOADED
        assert session.all_chunks_received
        assert session.progress == 1.0

    def test_record_chunk_out_of_range(self):
        with pytest.raises(ValueError):
            make_session().record_chunk(3)

    def test_expiry_is_inclusive(self):
        session = make_session()

        assert not session.is_expired(NOW + timedelta(hours=23, minutes=59, seconds=59))
        assert session.is_expired(NOW + timedelta(hours=24))

    def test_rejects_inconsistent_chunk_plan(self):
        with pytest.raises(ValueError):
            UploadSession(
                upload_id=UploadSessionId.generate().value,
                owner_id="user-1",
                file_name="show.fseq",
                file_size=2560,
                mime_type="application/octet-stream",
                category=FileCategory.RENDERED,
                chunk_size=1024,
                total_chunks=2,
            )

    def test_dict_form_restores_session(self):
        session = make_session()
        session.record_chunk(2)

        restored = UploadSession.from_dict(session.to_dict())

        assert restored == session


class TestUploadStatus:
    """Status transitions."""

    def test_terminal_statuses(self):
        terminal = {s for s in UploadStatus if s.is_terminal}

        assert terminal == {UploadStatus.COMPLETED, UploadStatus.ABORTED, UploadStatus.EXPIRED}

    def test_only_open_sessions_accept_chunks(self):
        accepting = {s for s in UploadStatus if s.accepts_chunks}

        assert accepting == {UploadStatus.INITIATED, UploadStatus.UPLOADING}

    def test_processing_only_completes(self):
        assert UploadStatus.PROCESSING.can_transition_to(UploadStatus.COMPLETED)
        assert not UploadStatus.PROCESSING.can_transition_to(UploadStatus.ABORTED)
        assert not UploadStatus.COMPLETED.can_transition_to(UploadStatus.UPLOADING)
