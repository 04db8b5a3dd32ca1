"""Metadata extractor.

ONLY format metadata extraction - reads FSEQ headers and xLights XSQ
documents into typed metadata.

Callers treat extraction as an enrichment: a MetadataExtractionFailed is
caught at the call site and replaced with absent metadata.

Following maximum separation architecture - one file = one purpose.
"""

import asyncio
import logging
import struct
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

import aiofiles

from ...core.exceptions import MetadataExtractionFailed
from ...core.value_objects import (
    ABSENT_METADATA,
    FileCategory,
    FormatMetadata,
    FseqMetadata,
    XsqMetadata,
)

logger = logging.getLogger(__name__)

FSEQ_MAGIC = b"PSEQ"
FSEQ_MIN_HEADER = 20
FSEQ_MAX_COUNT = 1_000_000

# magic, data offset, minor, major, header length, channels, frames, step ms, compression
_FSEQ_HEADER = struct.Struct("<4sHBBHIIBB")

FSEQ_COMPRESSION = {
    0: "none",
    1: "zstd",
    2: "zlib",
}

XSQ_ROOTS = {"xsequence", "sequence"}
_XSQ_HEAD_FIELDS = {
    "version": "xlights_version",
    "mediafile": "media_file",
    "sequencetype": "sequence_type",
    "sequencetiming": "sequence_timing",
}


def parse_fseq_header(header: bytes) -> FseqMetadata:
    """Decode the fixed FSEQ header.

    Raises:
        MetadataExtractionFailed: On a short buffer, wrong magic, zero or
            implausibly large counts
    """
    if len(header) < FSEQ_MIN_HEADER:
        raise MetadataExtractionFailed("fseq", f"header too short ({len(header)} bytes)")

    (magic, _data_offset, minor, major, _header_length,
     channel_count, frame_count, step_time, compression) = _FSEQ_HEADER.unpack_from(header)

    if magic != FSEQ_MAGIC:
        raise MetadataExtractionFailed("fseq", "magic bytes mismatch")
    if channel_count == 0 or frame_count == 0 or step_time == 0:
        raise MetadataExtractionFailed("fseq", "zero values in header")
    if channel_count > FSEQ_MAX_COUNT:
        raise MetadataExtractionFailed("fseq", "channel count too large")
    if frame_count > FSEQ_MAX_COUNT:
        raise MetadataExtractionFailed("fseq", "frame count too large")

    return FseqMetadata(
        version=f"{major}.{minor}",
        channel_count=channel_count,
        frame_count=frame_count,
        step_time_ms=step_time,
        sequence_length_seconds=frame_count * step_time / 1000,
        fps=round(1000 / step_time),
        compression=FSEQ_COMPRESSION.get(compression, "unknown"),
    )


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1].lower()


def parse_xsq_file(path: Path) -> XsqMetadata:
    """Stream an xLights sequence and collect header facts and counts.

    Header values are taken from root attributes or from ``<head>``
    children, whichever the file uses.

    Raises:
        MetadataExtractionFailed: On malformed XML or a foreign root element
    """
    fields = {}
    model_count = 0
    effect_count = 0
    root_seen = False
    in_head = 0

    try:
        for event, elem in ET.iterparse(str(path), events=("start", "end")):
            name = _local_name(elem.tag)
            if event == "start":
                if not root_seen:
                    root_seen = True
                    if name not in XSQ_ROOTS:
                        raise MetadataExtractionFailed("xsq", f"unexpected root element <{elem.tag}>")
                    for attr, value in elem.attrib.items():
                        key = _XSQ_HEAD_FIELDS.get(attr.lower())
                        if key:
                            fields[key] = value
                elif name == "head":
                    in_head += 1
                continue

            if name == "model":
                model_count += 1
            elif name == "effect":
                effect_count += 1
            elif name == "head":
                in_head -= 1
            elif in_head and name in _XSQ_HEAD_FIELDS and elem.text and elem.text.strip():
                fields.setdefault(_XSQ_HEAD_FIELDS[name], elem.text.strip())
            elem.clear()
    except ET.ParseError as e:
        raise MetadataExtractionFailed("xsq", f"malformed XML: {e}") from e

    if not root_seen:
        raise MetadataExtractionFailed("xsq", "empty document")

    return XsqMetadata(model_count=model_count, effect_count=effect_count, **fields)


class MetadataExtractor:
    """Chooses a parser by category and runs it off the event loop."""

    async def extract(
        self,
        path: Path,
        category: FileCategory,
        header: Optional[bytes] = None,
    ) -> FormatMetadata:
        """Extract metadata for a committed candidate file.

        Raises:
            MetadataExtractionFailed: When the parser rejects the content
        """
        if category is FileCategory.RENDERED:
            if header is None or len(header) < FSEQ_MIN_HEADER:
                async with aiofiles.open(path, "rb") as f:
                    header = await f.read(_FSEQ_HEADER.size)
            return parse_fseq_header(header)

        if category is FileCategory.SOURCE:
            try:
                return await asyncio.to_thread(parse_xsq_file, path)
            except OSError as e:
                raise MetadataExtractionFailed("xsq", str(e)) from e

        return ABSENT_METADATA


def create_metadata_extractor() -> MetadataExtractor:
    """Create metadata extractor."""
    return MetadataExtractor()
