"""Upload session identifier value object.

ONLY upload session identifier - an opaque, unguessable token that is
also safe to use as a staging directory name.

Following maximum separation architecture - one file = one purpose.
"""

import re
from dataclasses import dataclass

from ....utils.hashing import generate_upload_id, UPLOAD_ID_PREFIX

_UPLOAD_ID_PATTERN = re.compile(r"^" + re.escape(UPLOAD_ID_PREFIX) + r"[A-Za-z0-9_-]{32}$")


@dataclass(frozen=True)
class UploadSessionId:
    """Upload session identifier value object.

    Generated from the CSPRNG only; never derived from user input or a
    counter so other users' sessions cannot be enumerated.
    """

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not _UPLOAD_ID_PATTERN.match(self.value):
            raise ValueError(f"Invalid upload session ID format: {self.value!r}")

    @classmethod
    def generate(cls) -> 'UploadSessionId':
        return cls(generate_upload_id())

    @staticmethod
    def is_valid(value: str) -> bool:
        return isinstance(value, str) and bool(_UPLOAD_ID_PATTERN.match(value))

    def __str__(self) -> str:
        return self.value
