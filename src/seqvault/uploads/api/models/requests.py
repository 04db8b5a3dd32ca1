"""Upload request models."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class InitiateUploadRequest(BaseModel):
    """Request model for opening a chunked upload session."""

    file_name: str = Field(..., description="Original file name")
    file_size: int = Field(..., description="Total size in bytes")
    mime_type: str = Field("application/octet-stream", description="Declared MIME type")
    category: str = Field(..., description="SOURCE, RENDERED, ASSET or PREVIEW")
    product_id: Optional[str] = Field(None, description="Product to attach the file to")
    version_id: Optional[str] = Field(None, description="Product version to attach the file to")

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip().upper()
