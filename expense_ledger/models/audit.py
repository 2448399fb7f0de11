"""
Audit Models for the Expense Ledger

Every mutation of the ledger and every persistence problem is logged.
This provides:
1. Traceability of what was added, removed or cleared
2. A side channel for durability failures that never reach the UI as errors
3. A record of entries dropped while loading, so lost data can be recovered

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Snapshot lifecycle
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_CORRUPT = "snapshot_corrupt"
    SNAPSHOT_QUARANTINED = "snapshot_quarantined"
    MALFORMED_RECORD_DROPPED = "malformed_record_dropped"

    # Mutations
    RECORD_APPENDED = "record_appended"
    RECORD_REMOVED = "record_removed"
    SNAPSHOT_CLEARED = "snapshot_cleared"

    # Intake
    ENTRY_REJECTED = "entry_rejected"

    # Persistence
    PERSISTENCE_READ_FAILED = "persistence_read_failed"
    PERSISTENCE_WRITE_FAILED = "persistence_write_failed"

    # Export
    EXPORT_GENERATED = "export_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    One entry in the ledger's side-channel log.

    `entity_id` is a record id for mutations and the storage key for
    snapshot and persistence events.
    """

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Aware UTC instant the event was raised"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="'record', 'snapshot', 'entry' or 'export'"
    )
    entity_id: Optional[str] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = Field(
        default=None,
        description="Text of the storage or decode error, if any"
    )
    is_user_action: bool = Field(
        default=False,
        description="Raised directly by something the user did in the UI"
    )

    def to_log_dict(self) -> dict:
        """Flatten to JSON-friendly values for the structlog renderer."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    One static constructor per event type, so wording and severity
    stay consistent wherever an event is raised.

    Usage:
        event = AuditEventBuilder.record_appended(record_id, "50000", "food")
        event = AuditEventBuilder.persistence_write_failed(key, "append", err)
    """

    @staticmethod
    def snapshot_loaded(key: str, loaded: int, dropped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            severity=AuditSeverity.WARNING if dropped else AuditSeverity.INFO,
            entity_type="snapshot",
            entity_id=key,
            description=f"Loaded {loaded} records ({dropped} dropped)",
            details={
                "loaded": loaded,
                "dropped": dropped,
            },
        )

    @staticmethod
    def snapshot_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_CORRUPT,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Persisted snapshot could not be decoded; starting empty",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_quarantined(key: str, quarantine_key: str, size: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_QUARANTINED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            entity_id=key,
            description=f"Raw snapshot copied to '{quarantine_key}'",
            details={
                "quarantine_key": quarantine_key,
                "size_bytes": size,
            },
        )

    @staticmethod
    def malformed_record_dropped(
        key: str,
        position: int,
        reason: str,
        raw_entry: Any,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MALFORMED_RECORD_DROPPED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            entity_id=key,
            description=f"Dropped malformed entry at position {position}",
            details={
                "position": position,
                "reason": reason,
                "raw_entry": repr(raw_entry)[:300],
            },
        )

    @staticmethod
    def record_appended(record_id: str, amount: str, category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_APPENDED,
            entity_type="record",
            entity_id=record_id,
            description=f"Expense recorded: {category} - {amount}",
            details={
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def record_removed(record_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REMOVED,
            entity_type="record",
            entity_id=record_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def snapshot_cleared(key: str, removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="snapshot",
            entity_id=key,
            description=f"All expenses cleared ({removed} removed)",
            details={
                "removed": removed,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.INFO,
            entity_type="entry",
            description=f"Entry rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def persistence_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Byte store read failed; starting empty",
            error_message=error_message,
        )

    @staticmethod
    def persistence_write_failed(
        key: str,
        operation: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description=f"Byte store write failed during {operation}; change kept in memory only",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def export_generated(record_count: int, filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            entity_id=filename,
            description=f"Exported {record_count} records",
            details={
                "record_count": record_count,
            },
            is_user_action=True,
        )
