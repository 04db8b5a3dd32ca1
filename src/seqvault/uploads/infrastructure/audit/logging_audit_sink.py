"""Audit sink writing structured events to the audit logger."""

import json
import logging

from ....config.logging_config import AUDIT_LOGGER_NAME
from ...core.protocols.audit_sink import AuditEvent

audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)


class LoggingAuditSink:
    """Emit each audit event as one JSON log line.

    Security events go out at WARNING so they survive quiet log levels.
    """

    def __init__(self, logger: logging.Logger = audit_logger):
        self._logger = logger

    async def record(self, event: AuditEvent) -> None:
        level = logging.WARNING if event.is_security_event else logging.INFO
        self._logger.log(level, json.dumps(event.to_dict(), default=str, sort_keys=True))
