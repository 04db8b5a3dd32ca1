"""Storage key value object.

ONLY storage key - the durable location of a committed file, validated
so it can never address anything outside the storage root.

Following maximum separation architecture - one file = one purpose.
"""

import re
from dataclasses import dataclass

from ....utils.hashing import generate_storage_key

_KEY_PATTERN = re.compile(r"^[a-z0-9_-]+(/[A-Za-z0-9._-]+)+$")
MAX_KEY_LENGTH = 1024


@dataclass(frozen=True)
class StorageKey:
    """Relative, slash-separated key under a storage root."""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError("Storage key cannot be empty")
        if len(self.value) > MAX_KEY_LENGTH:
            raise ValueError(f"Storage key too long ({len(self.value)} > {MAX_KEY_LENGTH})")
        if not _KEY_PATTERN.match(self.value):
            raise ValueError(f"Invalid storage key: {self.value!r}")
        if any(part in {".", ".."} for part in self.value.split("/")):
            raise ValueError(f"Storage key must not contain relative segments: {self.value!r}")

    @classmethod
    def generate(cls, file_name: str, category: str) -> 'StorageKey':
        """``<category>/<unix-ms>-<16 hex>-<sanitized name>``."""
        return cls(generate_storage_key(file_name, category))

    def __str__(self) -> str:
        return self.value
