"""File category value object.

ONLY file category - the closed set of categories a creator can upload,
with the extension, size and MIME rules each one enforces.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

MB = 1024 * 1024


class FileCategory(Enum):
    """Declared category of an uploaded file."""
    SOURCE = "SOURCE"        # editable sequence (.xsq / .xml)
    RENDERED = "RENDERED"    # rendered show file (.fseq)
    ASSET = "ASSET"          # audio, images, models
    PREVIEW = "PREVIEW"      # preview videos

    @classmethod
    def from_string(cls, value: str) -> 'FileCategory':
        """Case-insensitive lookup.

        Raises:
            ValueError: If ``value`` names no category
        """
        try:
            return cls(str(value).strip().upper())
        except ValueError as e:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown file category {value!r}; expected one of {valid}") from e

    @classmethod
    def parse(cls, value: str) -> Optional['FileCategory']:
        try:
            return cls.from_string(value)
        except ValueError:
            return None

    @property
    def rules(self) -> 'CategoryRules':
        return CATEGORY_RULES[self]


@dataclass(frozen=True)
class CategoryRules:
    """Constraints enforced for one category."""

    extensions: FrozenSet[str]
    max_size_bytes: int
    mime_types: FrozenSet[str]

    def allows_extension(self, extension: str) -> bool:
        return extension.lower() in self.extensions

    def allows_mime_type(self, mime_type: str) -> bool:
        return mime_type.lower().split(";", 1)[0].strip() in self.mime_types

    @property
    def expected_extensions(self) -> str:
        return ", ".join(sorted(self.extensions))


CATEGORY_RULES: Dict[FileCategory, CategoryRules] = {
    FileCategory.RENDERED: CategoryRules(
        extensions=frozenset({".fseq"}),
        max_size_bytes=500 * MB,
        mime_types=frozenset({"application/octet-stream", "application/x-fseq"}),
    ),
    FileCategory.SOURCE: CategoryRules(
        extensions=frozenset({".xsq", ".xml"}),
        max_size_bytes=100 * MB,
        mime_types=frozenset({"text/xml", "application/xml", "application/x-xsq"}),
    ),
    FileCategory.ASSET: CategoryRules(
        extensions=frozenset({".mp3", ".wav", ".ogg", ".xmodel", ".jpg", ".jpeg", ".png", ".gif"}),
        max_size_bytes=50 * MB,
        mime_types=frozenset({
            "audio/mpeg", "audio/wav", "audio/x-wav", "audio/ogg",
            "image/jpeg", "image/png", "image/gif",
            "application/octet-stream", "application/xml", "text/xml",
        }),
    ),
    FileCategory.PREVIEW: CategoryRules(
        extensions=frozenset({".mp4", ".webm", ".mov", ".gif"}),
        max_size_bytes=200 * MB,
        mime_types=frozenset({"video/mp4", "video/webm", "video/quicktime", "image/gif"}),
    ),
}
