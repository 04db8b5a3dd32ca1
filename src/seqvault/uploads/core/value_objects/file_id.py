"""Stored file identifier value object.

ONLY stored file identifier - UUIDv7 for time-ordered index locality.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from uuid import UUID

from ....utils.uuid import generate_uuid_v7


@dataclass(frozen=True)
class FileId:
    """Identifier of a committed, deduplicated file."""

    value: str

    def __post_init__(self):
        try:
            normalized = str(UUID(str(self.value)))
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid file ID format: {self.value!r}") from e
        object.__setattr__(self, "value", normalized)

    @classmethod
    def generate(cls) -> 'FileId':
        """Generate a new time-ordered file ID using UUIDv7."""
        return cls(generate_uuid_v7())

    def __str__(self) -> str:
        return self.value
