"""Initiate upload command.

ONLY upload initiation - validates the declared file, authorizes product
linkage and opens a new chunked upload session.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Union

from ....utils.datetime import utc_now
from ..services.audit_recorder import AuditRecorder
from ..services.product_access import ProductAccessPolicy
from ..validators import FileValidator
from ...core.entities import UploadSession
from ...core.exceptions import ValidationFailed
from ...core.protocols import UploadSessionStore
from ...core.value_objects import FileCategory

logger = logging.getLogger(__name__)


@dataclass
class InitiateUploadData:
    """Data required to open an upload session."""

    owner_id: str
    file_name: str
    file_size: int
    mime_type: str
    category: Union[FileCategory, str]

    # Optional catalog linkage
    product_id: Optional[str] = None
    version_id: Optional[str] = None


@dataclass
class InitiateUploadResult:
    """Result of upload initiation."""

    upload_id: str
    chunk_size: int
    total_chunks: int
    expires_at: datetime
    warnings: List[str] = field(default_factory=list)


class InitiateUploadCommand:
    """Command to open a chunked upload session.

    Nothing is created unless every validation check passes and the
    caller owns the declared product.
    """

    def __init__(
        self,
        store: UploadSessionStore,
        validator: FileValidator,
        product_access: ProductAccessPolicy,
        audit: AuditRecorder,
        chunk_size: int,
        session_ttl: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._validator = validator
        self._product_access = product_access
        self._audit = audit
        self._chunk_size = chunk_size
        self._session_ttl = session_ttl
        self._clock = clock

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def execute(self, data: InitiateUploadData) -> InitiateUploadResult:
        """Execute upload initiation.

        Raises:
            ValidationFailed: If any validation check rejects the request
            UploadForbidden: If the caller does not own the declared product
        """
        validation = self._validator.validate_file(
            data.file_name, data.file_size, data.mime_type, data.category
        )
        if not validation.valid:
            logger.info(f"Rejected upload initiation by {data.owner_id}: {validation.errors}")
            raise ValidationFailed(validation.errors, validation.warnings, validation.error_codes)

        category = (
            data.category if isinstance(data.category, FileCategory)
            else FileCategory.from_string(data.category)
        )

        await self._product_access.ensure_can_attach(data.owner_id, data.product_id)

        session = UploadSession.create(
            owner_id=data.owner_id,
            file_name=data.file_name,
            file_size=data.file_size,
            mime_type=data.mime_type,
            category=category,
            chunk_size=self._chunk_size,
            ttl=self._session_ttl,
            now=self._clock(),
            product_id=data.product_id,
            version_id=data.version_id,
        )
        await self._store.create(session)

        logger.info(
            f"Initiated upload {session.upload_id} for {data.file_name} "
            f"({data.file_size} bytes, {session.total_chunks} chunks) by {data.owner_id}"
        )
        await self._audit.file_uploaded(
            user_id=data.owner_id,
            entity_type="upload_session",
            entity_id=session.upload_id,
            metadata={
                "action": "initiate_upload",
                "file_name": data.file_name,
                "file_size": data.file_size,
                "category": category.value,
                "total_chunks": session.total_chunks,
                "product_id": data.product_id,
                "version_id": data.version_id,
            },
        )

        return InitiateUploadResult(
            upload_id=session.upload_id,
            chunk_size=session.chunk_size,
            total_chunks=session.total_chunks,
            expires_at=session.expires_at,
            warnings=validation.warnings,
        )


def create_initiate_upload_command(
    store: UploadSessionStore,
    validator: FileValidator,
    product_access: ProductAccessPolicy,
    audit: AuditRecorder,
    chunk_size: int,
    session_ttl: timedelta,
    clock: Callable[[], datetime] = utc_now,
) -> InitiateUploadCommand:
    """Create initiate upload command."""
    return InitiateUploadCommand(store, validator, product_access, audit, chunk_size, session_ttl, clock)
