"""Simple upload command.

ONLY single-request upload - the whole file arrives in one body and goes
through the same integrity, dedup, metadata and persistence path as a
finalized chunked upload.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..services.file_assembler import FileAssembler
from ..services.product_access import ProductAccessPolicy
from ..services.session_guard import SessionGuard
from ..services.stored_file_committer import CommitRequest, StoredFileCommitter
from ..validators import FileValidator
from ...core.exceptions import ValidationFailed
from ...core.value_objects import FileCategory, UploadSessionId
from .complete_upload import CompleteUploadResult

logger = logging.getLogger(__name__)


@dataclass
class SimpleUploadData:
    """Data required for a single-request upload."""

    owner_id: str
    file_name: str
    mime_type: str
    category: Union[FileCategory, str]
    content: bytes
    product_id: Optional[str] = None
    version_id: Optional[str] = None


class SimpleUploadCommand:
    """Command to upload a small file in one request."""

    def __init__(
        self,
        validator: FileValidator,
        product_access: ProductAccessPolicy,
        guard: SessionGuard,
        assembler: FileAssembler,
        committer: StoredFileCommitter,
    ):
        self._validator = validator
        self._product_access = product_access
        self._guard = guard
        self._assembler = assembler
        self._committer = committer

    async def execute(self, data: SimpleUploadData) -> CompleteUploadResult:
        """Execute single-request upload.

        Raises:
            ValidationFailed, UploadForbidden, IntegrityCheckFailed,
            StorageWriteFailed
        """
        validation = self._validator.validate_file(
            data.file_name, len(data.content), data.mime_type, data.category
        )
        if not validation.valid:
            raise ValidationFailed(validation.errors, validation.warnings, validation.error_codes)

        category = (
            data.category if isinstance(data.category, FileCategory)
            else FileCategory.from_string(data.category)
        )
        await self._product_access.ensure_can_attach(data.owner_id, data.product_id)

        # Transient workspace id, never registered as a session
        workspace_id = UploadSessionId.generate().value
        try:
            assembled = await self._assembler.materialize(workspace_id, data.content)
            committed = await self._committer.commit(
                CommitRequest(
                    owner_id=data.owner_id,
                    file_name=data.file_name,
                    mime_type=data.mime_type,
                    category=category,
                    declared_size=len(data.content),
                    upload_id=workspace_id,
                    product_id=data.product_id,
                    version_id=data.version_id,
                ),
                assembled,
            )
        finally:
            await self._guard.discard_staged(workspace_id)

        stored = committed.stored_file
        logger.info(f"Simple upload of {data.file_name} stored as {stored.file_id}")
        return CompleteUploadResult(
            file_id=stored.file_id,
            storage_key=stored.storage_key,
            content_hash=stored.content_hash,
            size_bytes=stored.size_bytes,
            metadata=stored.metadata,
            deduplicated=committed.deduplicated,
        )


def create_simple_upload_command(
    validator: FileValidator,
    product_access: ProductAccessPolicy,
    guard: SessionGuard,
    assembler: FileAssembler,
    committer: StoredFileCommitter,
) -> SimpleUploadCommand:
    """Create simple upload command."""
    return SimpleUploadCommand(validator, product_access, guard, assembler, committer)
