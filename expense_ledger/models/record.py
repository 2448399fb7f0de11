"""
Core Data Models for the Expense Ledger

These models define the strict schemas for every expense flowing through
the system. They are designed to:
1. Enforce the record rules at runtime (positive amount, known category)
2. Provide clear validation error messages
3. Serialize to the persisted snapshot layout

DESIGN DECISION: Records are frozen. Nothing edits an expense in place;
a correction is a delete followed by a new entry.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent grouping in the breakdowns and reports.
    """
    FOOD = "food"
    TRANSPORT = "transport"
    UTILITIES = "utilities"
    ENTERTAINMENT = "entertainment"
    HEALTHCARE = "healthcare"
    SHOPPING = "shopping"
    EDUCATION = "education"
    TUITION = "tuition"
    MEDICINE = "medicine"
    GROCERIES = "groceries"
    HOUSEHOLD = "household"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_DISPLAY[self][1]

    @property
    def icon(self) -> str:
        return CATEGORY_DISPLAY[self][0]

    @classmethod
    def parse(cls, value: object) -> Optional["ExpenseCategory"]:
        """Resolve a raw code (case and surrounding whitespace ignored)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        code = value.strip().lower()
        if not code:
            return None
        try:
            return cls(code)
        except ValueError:
            return None


# (icon, label) per category
CATEGORY_DISPLAY: dict[ExpenseCategory, tuple[str, str]] = {
    ExpenseCategory.FOOD: ("🍲", "Food"),
    ExpenseCategory.TRANSPORT: ("🚌", "Transport"),
    ExpenseCategory.UTILITIES: ("💡", "Utilities"),
    ExpenseCategory.ENTERTAINMENT: ("🎬", "Entertainment"),
    ExpenseCategory.HEALTHCARE: ("🩺", "Healthcare"),
    ExpenseCategory.SHOPPING: ("🛍️", "Shopping"),
    ExpenseCategory.EDUCATION: ("🎓", "Education"),
    ExpenseCategory.TUITION: ("📚", "Tuition"),
    ExpenseCategory.MEDICINE: ("💊", "Medicine"),
    ExpenseCategory.GROCERIES: ("🛒", "Groceries"),
    ExpenseCategory.HOUSEHOLD: ("🏠", "Household"),
    ExpenseCategory.OTHER: ("📌", "Other"),
}

# Amounts are kept to the currency's minor unit. Fifteen significant
# digits also survive a round trip through a JSON float.
AMOUNT_QUANTUM = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999999.99")


def to_millisecond_utc(value: datetime) -> datetime:
    """
    Normalize an instant to UTC with millisecond precision.

    The persisted format keeps milliseconds only, so every timestamp the
    store hands out is truncated the same way.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def _json_amount(amount: Decimal):
    """Integral amounts as int, others as a float that reads back exactly."""
    if amount == amount.to_integral_value():
        return int(amount)
    value = float(amount)
    if Decimal(repr(value)) != amount:
        raise ValueError(f"amount {amount} cannot be stored exactly")
    return value


def format_instant(value: datetime) -> str:
    """Render an instant as ISO-8601 UTC with milliseconds and a trailing Z."""
    return (
        to_millisecond_utc(value)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


# =============================================================================
# CORE RECORD MODELS
# =============================================================================

class ExpenseCandidate(BaseModel):
    """
    A normalized expense payload that has passed intake validation.

    It lacks `id` and `timestamp`; the store assigns both on append.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=15,
        decimal_places=2,
        description="Amount in currency units"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional free-text annotation"
    )

    @field_validator("note")
    @classmethod
    def empty_note_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class Record(BaseModel):
    """
    One recorded expense.

    CRITICAL: Records are only created by the RecordStore's append
    operation (or rehydrated from persisted storage). Callers never
    pick the id or the timestamp.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount in currency units"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    timestamp: datetime = Field(
        ...,
        alias="date",
        description="Creation instant (UTC, millisecond precision)"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional free-text annotation"
    )

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Naive instants are read as UTC."""
        return to_millisecond_utc(v)

    def local_date(self, tz=None) -> date:
        """Calendar date of this record in the given (or local) timezone."""
        return self.timestamp.astimezone(tz).date()

    def to_storage_dict(self) -> dict:
        """
        Convert to the persisted layout.

        Keys: id, amount (JSON number), category (code), date (ISO-8601),
        note (omitted when absent).

        Raises:
            ValueError: If the amount has no exact JSON number form
        """
        data = {
            "id": self.id,
            "amount": _json_amount(self.amount),
            "category": self.category.value,
            "date": format_instant(self.timestamp),
        }
        if self.note is not None:
            data["note"] = self.note
        return data

    @classmethod
    def from_candidate(
        cls,
        candidate: ExpenseCandidate,
        record_id: str,
        timestamp: datetime,
    ) -> "Record":
        return cls(
            id=record_id,
            amount=candidate.amount,
            category=candidate.category,
            timestamp=timestamp,
            note=candidate.note,
        )

    def __str__(self) -> str:
        note = f" | {self.note}" if self.note else ""
        return f"{self.amount} | {self.category.value} | {format_instant(self.timestamp)}{note}"
