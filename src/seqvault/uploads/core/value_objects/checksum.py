"""Content checksum value object.

ONLY content checksum - a validated SHA-256 hex digest with constant-time
comparison.

Following maximum separation architecture - one file = one purpose.
"""

import re
from dataclasses import dataclass
from typing import Union

from ....utils.hashing import HASH_ALGORITHM, HASH_HEX_LENGTH, digests_match, hash_buffer

_HEX_DIGEST = re.compile(r"^[0-9a-f]{%d}$" % HASH_HEX_LENGTH)


@dataclass(frozen=True)
class Checksum:
    """SHA-256 digest of a chunk or of a whole file.

    Accepts upper or lower case input and an optional ``sha256:`` prefix;
    the stored value is always the bare lowercase hex digest.
    """

    value: str

    ALGORITHM = HASH_ALGORITHM

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValueError(f"Checksum must be a string, got {type(self.value).__name__}")

        normalized = self.value.strip().lower()
        prefix = f"{self.ALGORITHM}:"
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix):]

        if not _HEX_DIGEST.match(normalized):
            raise ValueError(
                f"Invalid {self.ALGORITHM} checksum: expected {HASH_HEX_LENGTH} hex characters"
            )
        object.__setattr__(self, "value", normalized)

    @classmethod
    def from_content(cls, content: Union[bytes, bytearray, memoryview]) -> 'Checksum':
        return cls(hash_buffer(content))

    @staticmethod
    def is_valid(value: str) -> bool:
        try:
            Checksum(value)
        except ValueError:
            return False
        return True

    def matches(self, other: Union['Checksum', str]) -> bool:
        """Constant-time equality against another checksum or hex string."""
        other_value = other.value if isinstance(other, Checksum) else str(other)
        return digests_match(self.value, other_value)

    def __str__(self) -> str:
        return self.value
