"""Tests for show file metadata extraction."""

import struct

import pytest

from conftest import XSQ_DOCUMENT, fseq_bytes
from seqvault.uploads.application.services import MetadataExtractor, parse_fseq_header, parse_xsq_file
from seqvault.uploads.core.exceptions import MetadataExtractionFailed
from seqvault.uploads.core.value_objects import (
    ABSENT_METADATA,
    FileCategory,
    FseqMetadata,
    XsqMetadata,
    metadata_from_dict,
)


class TestFseqHeader:
    """Binary FSEQ header decoding."""

    def test_parse_v2_header(self):
        metadata = parse_fseq_header(fseq_bytes(64, channels=3000, frames=600, step_ms=25))

        assert metadata == FseqMetadata(
            version="2.0",
            channel_count=3000,
            frame_count=600,
            step_time_ms=25,
            sequence_length_seconds=15.0,
            fps=40,
            compression="none",
        )

    def test_compression_flag(self):
        header = struct.pack("<4sHBBHIIBB", b"PSEQ", 32, 0, 2, 32, 10, 10, 50, 1)

        assert parse_fseq_header(header).compression == "zstd"

    @pytest.mark.parametrize("header", [
        b"PSEQ",
        b"FSEQ" + b"\x00" * 28,
        struct.pack("<4sHBBHIIBB", b"PSEQ", 32, 0, 2, 32, 10, 0, 50, 0),
        struct.pack("<4sHBBHIIBB", b"PSEQ", 32, 0, 2, 32, 2_000_000, 10, 50, 0),
    ])
    def test_rejects_bad_headers(self, header):
        with pytest.raises(MetadataExtractionFailed):
            parse_fseq_header(header)


class TestXsqParsing:
    """xLights sequence parsing."""

    def test_parse_sequence(self, tmp_path):
        path = tmp_path / "show.xsq"
        path.write_bytes(XSQ_DOCUMENT)

        metadata = parse_xsq_file(path)

        assert metadata.xlights_version == "2024.05"
        assert metadata.media_file == "Jingle Bells.mp3"
        assert metadata.sequence_type == "Media"
        assert metadata.sequence_timing == "50 ms"
        assert metadata.model_count == 2
        assert metadata.effect_count == 3

    def test_header_from_root_attributes(self, tmp_path):
        path = tmp_path / "show.xsq"
        path.write_bytes(b'<sequence version="2023.1" mediaFile="a.mp3"><Effect/></sequence>')

        metadata = parse_xsq_file(path)

        assert metadata.xlights_version == "2023.1"
        assert metadata.media_file == "a.mp3"
        assert metadata.effect_count == 1

    @pytest.mark.parametrize("document", [b"<html><body/></html>", b"<xsequence><head>", b""])
    def test_rejects_foreign_or_broken_documents(self, tmp_path, document):
        path = tmp_path / "show.xsq"
        path.write_bytes(document)

        with pytest.raises(MetadataExtractionFailed):
            parse_xsq_file(path)


class TestMetadataExtractor:
    """Category based dispatch."""

    @pytest.mark.asyncio
    async def test_rendered_reads_header_from_file(self, tmp_path):
        path = tmp_path / "show.fseq"
        path.write_bytes(fseq_bytes(256))

        metadata = await MetadataExtractor().extract(path, FileCategory.RENDERED)

        assert isinstance(metadata, FseqMetadata)

    @pytest.mark.asyncio
    async def test_source_parsed_off_loop(self, tmp_path):
        path = tmp_path / "show.xsq"
        path.write_bytes(XSQ_DOCUMENT)

        metadata = await MetadataExtractor().extract(path, FileCategory.SOURCE)

        assert isinstance(metadata, XsqMetadata)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("category", [FileCategory.ASSET, FileCategory.PREVIEW])
    async def test_other_categories_have_no_metadata(self, tmp_path, category):
        path = tmp_path / "song.mp3"
        path.write_bytes(b"ID3" + b"\x00" * 64)

        assert await MetadataExtractor().extract(path, category) is ABSENT_METADATA

    def test_metadata_dict_form_round_trips_variants(self):
        fseq = parse_fseq_header(fseq_bytes(64))

        assert metadata_from_dict(fseq.to_dict()) == fseq
        assert metadata_from_dict({"kind": "bogus"}) is ABSENT_METADATA
        assert metadata_from_dict(None) is ABSENT_METADATA
