"""Upload API models."""

from .requests import InitiateUploadRequest
from .responses import (
    AbortUploadResponse,
    ChunkUploadResponse,
    CompleteUploadResponse,
    InitiateUploadResponse,
    UploadProgressResponse,
)

__all__ = [
    "InitiateUploadRequest",
    "AbortUploadResponse",
    "ChunkUploadResponse",
    "CompleteUploadResponse",
    "InitiateUploadResponse",
    "UploadProgressResponse",
]
