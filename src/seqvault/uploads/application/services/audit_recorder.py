"""Audit recorder.

ONLY audit trail recording - builds upload audit events and hands them to
the configured sink.

Recording is fire-and-forget with logged failure: the awaited call never
raises, so a broken audit backend cannot fail an upload.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ....utils.datetime import utc_now
from ...core.protocols import AuditAction, AuditEvent, AuditSeverity, AuditSink

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Best-effort writer of upload audit events."""

    def __init__(self, sink: Optional[AuditSink], clock: Callable[[], datetime] = utc_now):
        self._sink = sink
        self._clock = clock

    async def record_best_effort(self, event: AuditEvent) -> bool:
        """Record ``event``; log and drop any sink failure.

        Returns:
            True when the sink accepted the event
        """
        if self._sink is None:
            return False
        try:
            await self._sink.record(event)
        except Exception as e:
            logger.warning(
                f"Failed to record audit event {event.action.value} for "
                f"{event.entity_type} {event.entity_id}: {e}"
            )
            return False
        return True

    async def file_uploaded(
        self,
        user_id: str,
        entity_type: str,
        entity_id: str,
        metadata: Dict[str, Any],
    ) -> bool:
        return await self.record_best_effort(AuditEvent(
            action=AuditAction.FILE_UPLOADED,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata=metadata,
            occurred_at=self._clock(),
        ))

    async def file_deleted(
        self,
        user_id: str,
        entity_type: str,
        entity_id: str,
        metadata: Dict[str, Any],
    ) -> bool:
        return await self.record_best_effort(AuditEvent(
            action=AuditAction.FILE_DELETED,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata=metadata,
            occurred_at=self._clock(),
        ))

    async def security_alert(
        self,
        user_id: Optional[str],
        entity_type: str,
        entity_id: Optional[str],
        reason: str,
        severity: AuditSeverity = AuditSeverity.SECURITY,
        **metadata: Any,
    ) -> bool:
        logger.warning(f"Security alert on {entity_type} {entity_id}: {reason}")
        return await self.record_best_effort(AuditEvent(
            action=AuditAction.SECURITY_ALERT,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            metadata={"reason": reason, **metadata},
            severity=severity,
            occurred_at=self._clock(),
        ))
