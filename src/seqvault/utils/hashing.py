"""Content hashing and identifier generation.

A single digest, SHA-256, is used both for per-chunk integrity and for
whole-file deduplication. Streaming and in-memory hashing of the same
bytes always produce the same hex digest.
"""

import hashlib
import hmac
import os
import re
import secrets
from pathlib import Path
from typing import Union

import aiofiles

from .datetime import to_unix_ms

HASH_ALGORITHM = "sha256"
HASH_HEX_LENGTH = 64
READ_BLOCK_SIZE = 1024 * 1024

UPLOAD_ID_PREFIX = "upl_"
# 24 random bytes -> 32 url-safe characters (192 bits)
UPLOAD_ID_ENTROPY_BYTES = 24

STORAGE_NAME_MAX_LENGTH = 100

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def hash_buffer(data: Union[bytes, bytearray, memoryview]) -> str:
    """Return the lowercase SHA-256 hex digest of an in-memory buffer."""
    return hashlib.sha256(data).hexdigest()


async def hash_file(path: Union[str, Path], block_size: int = READ_BLOCK_SIZE) -> str:
    """Return the lowercase SHA-256 hex digest of a file, read in blocks."""
    hasher = IncrementalHasher()
    async with aiofiles.open(path, "rb") as f:
        while True:
            block = await f.read(block_size)
            if not block:
                break
            hasher.update(block)
    return hasher.hexdigest()


class IncrementalHasher:
    """SHA-256 over a stream of blocks that also counts the bytes seen."""

    def __init__(self):
        self._hash = hashlib.sha256()
        self.bytes_hashed = 0

    def update(self, block: bytes) -> None:
        self._hash.update(block)
        self.bytes_hashed += len(block)

    def hexdigest(self) -> str:
        return self._hash.hexdigest()


def digests_match(expected: str, actual: str) -> bool:
    """Constant-time, case-insensitive comparison of two hex digests."""
    return hmac.compare_digest(expected.strip().lower().encode(), actual.strip().lower().encode())


def generate_upload_id() -> str:
    """Unguessable upload session identifier.

    Pure CSPRNG output, never derived from user input or counters.
    """
    return UPLOAD_ID_PREFIX + secrets.token_urlsafe(UPLOAD_ID_ENTROPY_BYTES)


def sanitize_file_name(file_name: str) -> str:
    """Reduce a client file name to a safe single path component.

    Keeps only the base name, replaces anything outside ``[A-Za-z0-9._-]``
    with ``_`` and neutralises a leading dot.
    """
    base = os.path.basename(file_name.replace("\\", "/"))
    sanitized = _UNSAFE_NAME_CHARS.sub("_", base)
    if sanitized.startswith("."):
        sanitized = "_" + sanitized[1:]
    return sanitized or "file"


def generate_storage_key(file_name: str, category: str) -> str:
    """Build a durable storage key ``<category>/<unix-ms>-<rand>-<name>``.

    Embeds the category and sanitized name for debuggability; the random
    component keeps unrelated uploads of the same name apart.
    """
    random_part = secrets.token_hex(8)
    safe_name = sanitize_file_name(file_name)[:STORAGE_NAME_MAX_LENGTH]
    return f"{category.lower()}/{to_unix_ms()}-{random_part}-{safe_name}"
