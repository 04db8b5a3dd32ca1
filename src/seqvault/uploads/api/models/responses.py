"""Upload response models."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class InitiateUploadResponse(BaseModel):
    """Response model for a newly opened upload session."""

    upload_id: str = Field(..., description="Opaque upload session id")
    chunk_size: int = Field(..., description="Bytes per chunk; the last chunk holds the remainder")
    total_chunks: int = Field(..., description="Number of chunks to submit")
    expires_at: datetime = Field(..., description="Session expiry")
    warnings: List[str] = Field(default_factory=list, description="Non-blocking validation warnings")


class ChunkUploadResponse(BaseModel):
    """Response model for an accepted chunk."""

    upload_id: str
    chunk_index: int
    received_chunks: int
    total_chunks: int
    progress: float = Field(..., description="received / total")
    status: str
    all_chunks_uploaded: bool


class CompleteUploadResponse(BaseModel):
    """Response model for a finalized upload."""

    file_id: str
    storage_key: str
    content_hash: str
    size_bytes: int
    metadata: Dict[str, Any] = Field(default_factory=dict)
    deduplicated: bool


class AbortUploadResponse(BaseModel):
    """Response model for an aborted upload."""

    success: bool = True
    upload_id: str
    received_chunks: int
    total_chunks: int


class UploadProgressResponse(BaseModel):
    """Response model for an upload session's progress."""

    upload_id: str
    status: str
    file_name: str
    file_size: int
    category: str
    chunk_size: int
    total_chunks: int
    received_chunks: List[int]
    missing_chunks: List[int]
    progress: float
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
