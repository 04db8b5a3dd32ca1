"""
Upload router.

Chunked upload lifecycle (initiate, chunks, complete, abort, progress) plus
the single-request path for small files. Domain errors propagate to the
application exception handlers.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from ..application.services.upload_coordinator import UploadCoordinator
from ..application.commands import CompleteUploadResult
from ..application.validators import ValidationResult
from ..application.validators.file_validator import FILE_TOO_LARGE
from ..core.exceptions import InvalidChunkSize, ValidationFailed
from ..core.value_objects import CATEGORY_RULES, FileCategory
from .dependencies import enforce_upload_rate_limit, get_current_user_id, get_upload_coordinator
from .models import (
    AbortUploadResponse,
    ChunkUploadResponse,
    CompleteUploadResponse,
    InitiateUploadRequest,
    InitiateUploadResponse,
    UploadProgressResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
    responses={
        400: {"description": "Validation failed"},
        401: {"description": "Authentication required"},
        403: {"description": "Not the session or product owner"},
        404: {"description": "Upload session not found"},
        409: {"description": "Invalid session state"},
        410: {"description": "Upload session expired"},
        429: {"description": "Upload quota exceeded"},
    },
)


async def _read_bounded(part: UploadFile, limit: int) -> Optional[bytes]:
    """Part content, or None when the part holds more than ``limit`` bytes."""
    content = await part.read(limit + 1)
    if len(content) > limit:
        return None
    return content


def _simple_upload_limit(category: str) -> int:
    resolved = FileCategory.parse(category)
    if resolved is not None:
        return resolved.rules.max_size_bytes
    return max(rules.max_size_bytes for rules in CATEGORY_RULES.values())


def _completed(result: CompleteUploadResult) -> CompleteUploadResponse:
    return CompleteUploadResponse(
        file_id=result.file_id,
        storage_key=result.storage_key,
        content_hash=result.content_hash,
        size_bytes=result.size_bytes,
        metadata=result.metadata.to_dict(),
        deduplicated=result.deduplicated,
    )


@router.post(
    "/initiate",
    response_model=InitiateUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a chunked upload session",
    dependencies=[Depends(enforce_upload_rate_limit)],
)
async def initiate_upload(
    request: InitiateUploadRequest,
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> InitiateUploadResponse:
    result = await coordinator.initiate(
        owner_id=user_id,
        file_name=request.file_name,
        file_size=request.file_size,
        mime_type=request.mime_type,
        category=request.category,
        product_id=request.product_id,
        version_id=request.version_id,
    )
    return InitiateUploadResponse(
        upload_id=result.upload_id,
        chunk_size=result.chunk_size,
        total_chunks=result.total_chunks,
        expires_at=result.expires_at,
        warnings=result.warnings,
    )


@router.post(
    "/{upload_id}/chunks/{chunk_index}",
    response_model=ChunkUploadResponse,
    summary="Submit one chunk",
)
async def upload_chunk(
    upload_id: str,
    chunk_index: int,
    chunk: UploadFile = File(..., description="Chunk bytes"),
    chunk_hash: str = Form(..., description="SHA-256 hex digest of the chunk"),
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> ChunkUploadResponse:
    content = await _read_bounded(chunk, coordinator.chunk_size)
    if content is None:
        raise InvalidChunkSize.oversized(upload_id, chunk_index, coordinator.chunk_size)
    result = await coordinator.submit_chunk(
        upload_id=upload_id,
        user_id=user_id,
        chunk_index=chunk_index,
        chunk_hash=chunk_hash,
        content=content,
    )
    return ChunkUploadResponse(
        upload_id=result.upload_id,
        chunk_index=result.chunk_index,
        received_chunks=result.received_chunks,
        total_chunks=result.total_chunks,
        progress=result.progress,
        status=result.status.value,
        all_chunks_uploaded=result.all_chunks_uploaded,
    )


@router.post(
    "/{upload_id}/complete",
    response_model=CompleteUploadResponse,
    summary="Assemble, verify and store the uploaded file",
)
async def complete_upload(
    upload_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> CompleteUploadResponse:
    return _completed(await coordinator.complete_upload(upload_id, user_id))


@router.post(
    "/{upload_id}/abort",
    response_model=AbortUploadResponse,
    summary="Abort an upload and discard its chunks",
)
async def abort_upload(
    upload_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> AbortUploadResponse:
    result = await coordinator.abort_upload(upload_id, user_id)
    return AbortUploadResponse(
        success=result.aborted,
        upload_id=result.upload_id,
        received_chunks=result.received_chunks,
        total_chunks=result.total_chunks,
    )


@router.get(
    "/{upload_id}",
    response_model=UploadProgressResponse,
    summary="Get upload progress",
)
async def get_upload_progress(
    upload_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> UploadProgressResponse:
    progress = await coordinator.get_progress(upload_id, user_id)
    return UploadProgressResponse(
        upload_id=progress.upload_id,
        status=progress.status.value,
        file_name=progress.file_name,
        file_size=progress.file_size,
        category=progress.category.value,
        chunk_size=progress.chunk_size,
        total_chunks=progress.total_chunks,
        received_chunks=progress.received_chunks,
        missing_chunks=progress.missing_chunks,
        progress=progress.progress,
        created_at=progress.created_at,
        expires_at=progress.expires_at,
    )


@router.post(
    "/simple",
    response_model=CompleteUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a small file in one request",
    dependencies=[Depends(enforce_upload_rate_limit)],
)
async def simple_upload(
    file: UploadFile = File(...),
    category: str = Form(...),
    product_id: Optional[str] = Form(None),
    version_id: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    coordinator: UploadCoordinator = Depends(get_upload_coordinator),
) -> CompleteUploadResponse:
    category = category.strip().upper()
    limit = _simple_upload_limit(category)
    content = await _read_bounded(file, limit)
    if content is None:
        rejected = ValidationResult()
        rejected.error(FILE_TOO_LARGE, f"File exceeds the {limit} byte limit for {category}")
        raise ValidationFailed(rejected.errors, error_codes=rejected.error_codes)
    result = await coordinator.simple_upload(
        owner_id=user_id,
        file_name=file.filename or "",
        mime_type=file.content_type or "application/octet-stream",
        category=category,
        content=content,
        product_id=product_id,
        version_id=version_id,
    )
    return _completed(result)
