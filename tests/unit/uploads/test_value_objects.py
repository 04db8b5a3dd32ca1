"""Tests for upload value objects and the integrity validator."""

import re
from datetime import datetime, timezone

import pytest

from seqvault.uploads.application.validators import create_file_integrity_validator
from seqvault.uploads.core.entities import StoredFile
from seqvault.uploads.core.value_objects import (
    Checksum,
    FileCategory,
    FileFormat,
    FileId,
    FseqMetadata,
    StorageKey,
    UploadSessionId,
)
from seqvault.uploads.core.value_objects.file_format import describe_signature

from conftest import sha256

ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


class TestChecksum:
    """SHA-256 checksum normalization and comparison."""

    def test_prefix_and_case_are_normalized(self):
        checksum = Checksum("SHA256:" + ABC_SHA256.upper())

        assert checksum.value == ABC_SHA256
        assert str(checksum) == ABC_SHA256

    def test_from_content(self):
        assert Checksum.from_content(b"abc").value == ABC_SHA256

    @pytest.mark.parametrize("value", ["", "abc", "g" * 64, ABC_SHA256 + "0"])
    def test_invalid_values(self, value):
        assert not Checksum.is_valid(value)
        with pytest.raises(ValueError):
            Checksum(value)

    def test_matches_checksum_or_string(self):
        checksum = Checksum(ABC_SHA256)

        assert checksum.matches(Checksum(ABC_SHA256.upper()))
        assert checksum.matches(ABC_SHA256)
        assert not checksum.matches(sha256(b"other"))


class TestIdentifiers:
    """Upload session ids, file ids and storage keys."""

    def test_generated_upload_id_is_valid(self):
        upload_id = UploadSessionId.generate()

        assert UploadSessionId.is_valid(upload_id.value)
        assert str(upload_id) == upload_id.value

    @pytest.mark.parametrize("value", ["", "upl_short", "../upl_" + "a" * 32, "sess_" + "a" * 32])
    def test_malformed_upload_ids(self, value):
        assert not UploadSessionId.is_valid(value)
        with pytest.raises(ValueError):
            UploadSessionId(value)

    def test_file_id_is_uuid_v7(self):
        file_id = FileId.generate()

        assert file_id.value[14] == "7"

    def test_file_id_rejects_garbage(self):
        with pytest.raises(ValueError):
            FileId("not-a-uuid")

    def test_generated_storage_key(self):
        key = StorageKey.generate("My Show.fseq", "RENDERED")

        assert re.fullmatch(r"rendered/\d+-[0-9a-f]{16}-My_Show\.fseq", key.value)

    @pytest.mark.parametrize("value", [
        "",
        "/rendered/show.fseq",
        "rendered",
        "rendered/../secrets",
        "rendered/./show.fseq",
        "Rendered/show.fseq",
        "rendered/a b.fseq",
    ])
    def test_invalid_storage_keys(self, value):
        with pytest.raises(ValueError):
            StorageKey(value)


class TestFileFormat:
    """Extension mapping and magic signatures."""

    @pytest.mark.parametrize("file_name,expected", [
        ("show.FSEQ", FileFormat.FSEQ),
        ("song.jpg", FileFormat.JPEG),
        ("layout.xmodel", FileFormat.XMODEL),
        ("readme", FileFormat.UNKNOWN),
    ])
    def test_from_file_name(self, file_name, expected):
        assert FileFormat.from_file_name(file_name) is expected

    @pytest.mark.parametrize("file_format,header", [
        (FileFormat.FSEQ, b"PSEQ\x00\x02"),
        (FileFormat.PNG, b"\x89PNG\r\n\x1a\n"),
        (FileFormat.MP3, b"ID3\x04"),
        (FileFormat.MP3, b"\xff\xfb\x90"),
        (FileFormat.MP4, b"\x00\x00\x00\x18ftypmp42"),
        (FileFormat.WAV, b"RIFF\x24\x00\x00\x00WAVEfmt "),
    ])
    def test_matching_signatures(self, file_format, header):
        assert file_format.has_signature
        assert file_format.matches_signature(header)

    def test_mp4_requires_ftyp_box(self):
        assert not FileFormat.MP4.matches_signature(b"\x00\x00\x00\x18moov")

    def test_xml_family_has_no_signature(self):
        assert not FileFormat.XSQ.has_signature
        assert describe_signature(FileFormat.XSQ) is None
        assert describe_signature(FileFormat.FSEQ) == "PSEQ"


class TestFileIntegrityValidator:
    """Header checks against the claimed format."""

    def test_xsq_is_skipped(self):
        result = create_file_integrity_validator().validate_file_integrity(b"<xsequence/>", "show.xsq")

        assert result.valid
        assert result.skipped

    def test_mismatched_header_is_reported(self):
        result = create_file_integrity_validator().validate_file_integrity(b"GIF89a", "render.fseq")

        assert not result.valid
        assert "INTEGRITY_CHECK_FAILED" in result.errors[0]
        assert "PSEQ" in result.errors[0]


class TestStoredFile:
    """Stored file serialization."""

    def test_to_dict(self):
        created_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        stored = StoredFile(
            file_id="0190f1c2-0000-7000-8000-000000000001",
            file_name="show.fseq",
            original_name="show.fseq",
            category=FileCategory.RENDERED,
            size_bytes=2048,
            content_hash=ABC_SHA256,
            storage_key="rendered/1-00-show.fseq",
            mime_type="application/octet-stream",
            metadata=FseqMetadata(
                version="2.0", channel_count=512, frame_count=1200, step_time_ms=50,
                sequence_length_seconds=60.0, fps=20, compression="none",
            ),
            created_by="user-1",
            created_at=created_at,
        )

        data = stored.to_dict()

        assert data["category"] == "RENDERED"
        assert data["metadata"]["kind"] == "fseq"
        assert data["created_at"] == "2026-03-01T12:00:00+00:00"
        assert data["product_id"] is None
