"""
Logging audit sink — default AUDIT_SINK.

Writes every audit record to the "branchstock.audit" logger. Route that
logger to a file, syslog or a log shipper in the host's LOGGING setting.
"""

from __future__ import annotations

import logging

from branchstock.protocols.sinks import AuditRecord

logger = logging.getLogger('branchstock.audit')


class LoggingAuditSink:
    """Audit sink emitting one INFO record per event."""

    def record(self, event: AuditRecord) -> None:
        logger.info(
            event.description,
            extra={
                "action": event.action,
                "audit_module": event.module,
                "record_id": event.record_id,
                "actor_id": event.actor_id,
                "audit_metadata": event.metadata,
            },
        )
