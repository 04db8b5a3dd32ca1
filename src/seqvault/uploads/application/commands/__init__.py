"""Upload commands."""

from .initiate_upload import (
    InitiateUploadCommand,
    InitiateUploadData,
    InitiateUploadResult,
    create_initiate_upload_command,
)
from .submit_chunk import (
    SubmitChunkCommand,
    SubmitChunkData,
    SubmitChunkResult,
    create_submit_chunk_command,
)
from .complete_upload import (
    CompleteUploadCommand,
    CompleteUploadData,
    CompleteUploadResult,
    create_complete_upload_command,
)
from .abort_upload import (
    AbortUploadCommand,
    AbortUploadData,
    AbortUploadResult,
    create_abort_upload_command,
)
from .simple_upload import (
    SimpleUploadCommand,
    SimpleUploadData,
    create_simple_upload_command,
)

__all__ = [
    "InitiateUploadCommand",
    "InitiateUploadData",
    "InitiateUploadResult",
    "create_initiate_upload_command",
    "SubmitChunkCommand",
    "SubmitChunkData",
    "SubmitChunkResult",
    "create_submit_chunk_command",
    "CompleteUploadCommand",
    "CompleteUploadData",
    "CompleteUploadResult",
    "create_complete_upload_command",
    "AbortUploadCommand",
    "AbortUploadData",
    "AbortUploadResult",
    "create_abort_upload_command",
    "SimpleUploadCommand",
    "SimpleUploadData",
    "create_simple_upload_command",
]
