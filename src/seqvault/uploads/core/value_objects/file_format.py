"""File format value object.

ONLY file format family - derived from the extension, and the magic
signature each family must start with.

Following maximum separation architecture - one file = one purpose.
"""

import os
from enum import Enum
from typing import Callable, Dict, Optional


class FileFormat(Enum):
    """Format family of a file, keyed by extension."""
    FSEQ = "fseq"
    XSQ = "xsq"
    XML = "xml"
    XMODEL = "xmodel"
    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    MP3 = "mp3"
    WAV = "wav"
    OGG = "ogg"
    MP4 = "mp4"
    MOV = "mov"
    WEBM = "webm"
    UNKNOWN = "unknown"

    @classmethod
    def from_file_name(cls, file_name: str) -> 'FileFormat':
        return EXTENSION_FORMATS.get(file_extension(file_name), cls.UNKNOWN)

    @property
    def has_signature(self) -> bool:
        """XML-family and unknown formats have no fixed header."""
        return self in SIGNATURE_CHECKS

    def matches_signature(self, header: bytes) -> bool:
        check = SIGNATURE_CHECKS.get(self)
        return True if check is None else check(header)


def file_extension(file_name: str) -> str:
    """Lowercased extension including the dot, ``""`` when there is none."""
    return os.path.splitext(file_name)[1].lower()


EXTENSION_FORMATS: Dict[str, FileFormat] = {
    ".fseq": FileFormat.FSEQ,
    ".xsq": FileFormat.XSQ,
    ".xml": FileFormat.XML,
    ".xmodel": FileFormat.XMODEL,
    ".png": FileFormat.PNG,
    ".jpg": FileFormat.JPEG,
    ".jpeg": FileFormat.JPEG,
    ".gif": FileFormat.GIF,
    ".mp3": FileFormat.MP3,
    ".wav": FileFormat.WAV,
    ".ogg": FileFormat.OGG,
    ".mp4": FileFormat.MP4,
    ".mov": FileFormat.MOV,
    ".webm": FileFormat.WEBM,
}


def _iso_media(header: bytes, boxes: tuple) -> bool:
    # ISO base media: 4-byte box size then the box type
    return len(header) >= 8 and header[4:8] in boxes


def _mp3(header: bytes) -> bool:
    if header.startswith(b"ID3"):
        return True
    # MPEG audio frame sync: 11 set bits
    return len(header) >= 2 and header[0] == 0xFF and (header[1] & 0xE0) == 0xE0


SIGNATURE_CHECKS: Dict[FileFormat, Callable[[bytes], bool]] = {
    FileFormat.FSEQ: lambda h: h.startswith(b"PSEQ"),
    FileFormat.PNG: lambda h: h.startswith(b"\x89PNG"),
    FileFormat.JPEG: lambda h: h.startswith(b"\xff\xd8\xff"),
    FileFormat.GIF: lambda h: h.startswith(b"GIF8"),
    FileFormat.MP4: lambda h: _iso_media(h, (b"ftyp",)),
    FileFormat.MOV: lambda h: _iso_media(h, (b"ftyp", b"moov", b"wide", b"mdat", b"free")),
    FileFormat.WEBM: lambda h: h.startswith(b"\x1a\x45\xdf\xa3"),
    FileFormat.WAV: lambda h: len(h) >= 12 and h[:4] == b"RIFF" and h[8:12] == b"WAVE",
    FileFormat.OGG: lambda h: h.startswith(b"OggS"),
    FileFormat.MP3: _mp3,
}


def describe_signature(file_format: FileFormat) -> Optional[str]:
    """Human-readable name of the expected signature, for error messages."""
    return {
        FileFormat.FSEQ: "PSEQ",
        FileFormat.PNG: "PNG",
        FileFormat.JPEG: "JPEG SOI",
        FileFormat.GIF: "GIF8",
        FileFormat.MP4: "ftyp box",
        FileFormat.MOV: "QuickTime atom",
        FileFormat.WEBM: "EBML",
        FileFormat.WAV: "RIFF/WAVE",
        FileFormat.OGG: "OggS",
        FileFormat.MP3: "ID3 or MPEG frame sync",
    }.get(file_format)
