"""Upload session status value object.

ONLY upload status - the session state machine's states and legal
transitions.

Following maximum separation architecture - one file = one purpose.
"""

from enum import Enum
from typing import Dict, FrozenSet


class UploadStatus(Enum):
    """Upload session status."""
    INITIATED = "initiated"
    UPLOADING = "uploading"
    ALL_CHUNKS_UPLOADED = "all_chunks_uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    EXPIRED = "expired"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def accepts_chunks(self) -> bool:
        return self in CHUNK_ACCEPTING_STATUSES

    def can_transition_to(self, target: 'UploadStatus') -> bool:
        return target in ALLOWED_TRANSITIONS[self]


TERMINAL_STATUSES: FrozenSet[UploadStatus] = frozenset({
    UploadStatus.COMPLETED,
    UploadStatus.EXPIRED,
    UploadStatus.ABORTED,
})

CHUNK_ACCEPTING_STATUSES: FrozenSet[UploadStatus] = frozenset({
    UploadStatus.INITIATED,
    UploadStatus.UPLOADING,
})

_CANCELLABLE = frozenset({UploadStatus.EXPIRED, UploadStatus.ABORTED})

ALLOWED_TRANSITIONS: Dict[UploadStatus, FrozenSet[UploadStatus]] = {
    UploadStatus.INITIATED: frozenset({UploadStatus.UPLOADING, UploadStatus.ALL_CHUNKS_UPLOADED}) | _CANCELLABLE,
    UploadStatus.UPLOADING: frozenset({UploadStatus.ALL_CHUNKS_UPLOADED}) | _CANCELLABLE,
    UploadStatus.ALL_CHUNKS_UPLOADED: frozenset({UploadStatus.PROCESSING}) | _CANCELLABLE,
    # A finalize in flight owns the session until it completes or is discarded
    UploadStatus.PROCESSING: frozenset({UploadStatus.COMPLETED}),
    UploadStatus.COMPLETED: frozenset(),
    UploadStatus.EXPIRED: frozenset(),
    UploadStatus.ABORTED: frozenset(),
}
