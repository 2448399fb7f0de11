"""
Data Models Package

This package contains all Pydantic models used in the Expense Ledger.
All data flowing through the system must conform to these schemas.
"""

from expense_ledger.models.record import (
    AMOUNT_QUANTUM,
    CATEGORY_DISPLAY,
    MAX_AMOUNT,
    ExpenseCandidate,
    ExpenseCategory,
    Record,
    format_instant,
    to_millisecond_utc,
)
from expense_ledger.models.window import (
    PERIOD_PRESETS,
    TimeWindow,
    WindowKind,
    local_now,
)
from expense_ledger.models.results import (
    CategoryShare,
    CategoryTotal,
    IntakeErrorCode,
    IntakeResult,
    PeriodSummary,
    ValidationIssue,
)
from expense_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "AMOUNT_QUANTUM",
    "CATEGORY_DISPLAY",
    "MAX_AMOUNT",
    "ExpenseCandidate",
    "ExpenseCategory",
    "Record",
    "format_instant",
    "to_millisecond_utc",
    # Windows
    "PERIOD_PRESETS",
    "TimeWindow",
    "WindowKind",
    "local_now",
    # Results
    "CategoryShare",
    "CategoryTotal",
    "IntakeErrorCode",
    "IntakeResult",
    "PeriodSummary",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
