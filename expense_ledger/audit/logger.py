"""
Audit Logger

DESIGN DECISION: Every mutation of the ledger, and every persistence
problem, is logged. This provides:
1. Traceability of additions, deletions and clears
2. The reporting channel for durability failures (they never raise to the UI)
3. A trail of entries dropped on load

The audit logger:
- Is synchronous, like the rest of the ledger
- Only writes to the local log, never to the byte store it reports on
- Keeps a bounded list of recent events so the UI can show them
"""

import logging
from collections import deque
from typing import Any, Optional

import structlog

from expense_ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. Structured local log (JSON lines via structlog)
    2. An in-memory ring of recent events
    """

    def __init__(self, max_recent: int = 200):
        self._logger = structlog.get_logger("expense_ledger.audit")
        self._recent: deque[AuditEvent] = deque(maxlen=max_recent)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._recent.append(event)
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def recent(self, limit: Optional[int] = None) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._recent))
        return events if limit is None else events[:limit]

    # -- snapshot lifecycle -------------------------------------------------

    def log_snapshot_loaded(self, key: str, loaded: int, dropped: int) -> None:
        self.log(AuditEventBuilder.snapshot_loaded(key, loaded, dropped))

    def log_snapshot_corrupt(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.snapshot_corrupt(key, error_message))

    def log_snapshot_quarantined(self, key: str, quarantine_key: str, size: int) -> None:
        self.log(AuditEventBuilder.snapshot_quarantined(key, quarantine_key, size))

    def log_malformed_record(
        self,
        key: str,
        position: int,
        reason: str,
        raw_entry: Any,
    ) -> None:
        self.log(AuditEventBuilder.malformed_record_dropped(key, position, reason, raw_entry))

    # -- mutations ----------------------------------------------------------

    def log_record_appended(self, record_id: str, amount: str, category: str) -> None:
        self.log(AuditEventBuilder.record_appended(record_id, amount, category))

    def log_record_removed(self, record_id: str) -> None:
        self.log(AuditEventBuilder.record_removed(record_id))

    def log_snapshot_cleared(self, key: str, removed: int) -> None:
        self.log(AuditEventBuilder.snapshot_cleared(key, removed))

    def log_entry_rejected(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.entry_rejected(issues))

    # -- persistence --------------------------------------------------------

    def log_read_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.persistence_read_failed(key, error_message))

    def log_write_failed(self, key: str, operation: str, error_message: str) -> None:
        self.log(AuditEventBuilder.persistence_write_failed(key, operation, error_message))

    def log_export_generated(self, record_count: int, filename: str) -> None:
        self.log(AuditEventBuilder.export_generated(record_count, filename))
