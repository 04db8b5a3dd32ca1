"""Audit sink protocol.

ONLY audit trail contract - structured audit events and the sink that
accepts them.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from ....utils.datetime import utc_now


class AuditAction(Enum):
    """Audited upload actions."""
    FILE_UPLOADED = "FILE_UPLOADED"
    FILE_DELETED = "FILE_DELETED"
    SECURITY_ALERT = "SECURITY_ALERT"


class AuditSeverity(Enum):
    """Severity attached to an audit event."""
    INFO = "info"
    SECURITY = "security"
    ERROR = "error"


@dataclass(frozen=True)
class AuditEvent:
    """One audit trail entry."""

    action: AuditAction
    user_id: Optional[str]
    entity_type: str
    entity_id: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)
    severity: AuditSeverity = AuditSeverity.INFO
    occurred_at: datetime = field(default_factory=utc_now)

    @property
    def is_security_event(self) -> bool:
        return self.severity is AuditSeverity.SECURITY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "severity": self.severity.value,
            "user_id": self.user_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "metadata": self.metadata,
            "occurred_at": self.occurred_at.isoformat(),
        }


@runtime_checkable
class AuditSink(Protocol):
    """Audit sink protocol."""

    async def record(self, event: AuditEvent) -> None:
        """Persist one audit event. May raise; callers decide tolerance."""
        ...
