"""Upload queries."""

from .get_upload_progress import GetUploadProgressQuery, UploadProgress, create_get_upload_progress_query

__all__ = ["GetUploadProgressQuery", "UploadProgress", "create_get_upload_progress_query"]
