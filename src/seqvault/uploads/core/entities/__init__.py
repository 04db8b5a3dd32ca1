"""Upload entities."""

from .upload_session import UploadSession, calculate_total_chunks
from .stored_file import StoredFile

__all__ = ["UploadSession", "calculate_total_chunks", "StoredFile"]
