"""
Result models returned to the presentation layer.

Intake results carry field-scoped validation issues; summary models carry
the derived figures of the aggregation view.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from expense_ledger.models.record import ExpenseCandidate, ExpenseCategory, Record


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class IntakeErrorCode(str, Enum):
    """Kinds of intake rejection."""
    INVALID_AMOUNT = "invalid_amount"
    INVALID_CATEGORY = "invalid_category"


class ValidationIssue(BaseModel):
    """A single validation issue tied to one form field."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    code: IntakeErrorCode = Field(
        ...,
        description="Type of issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    raw_value: Optional[str] = Field(
        default=None,
        description="The value as the user supplied it"
    )


class IntakeResult(BaseModel):
    """
    Outcome of validating (and optionally saving) one form submission.

    Either `issues` is non-empty, or `candidate` is set. `record` is only
    set once the candidate has been appended to the store.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    candidate: Optional[ExpenseCandidate] = None
    record: Optional[Record] = None

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def saved(self) -> bool:
        return self.record is not None

    def issue_for(self, field: str) -> Optional[ValidationIssue]:
        """First issue reported for a field, if any."""
        return next((i for i in self.issues if i.field == field), None)

    @property
    def codes(self) -> set[IntakeErrorCode]:
        return {issue.code for issue in self.issues}


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class CategoryTotal(BaseModel):
    """Sum of amounts for one category."""

    category: ExpenseCategory
    total: Decimal


class CategoryShare(CategoryTotal):
    """Category sum with its share of the period total."""

    percentage: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of the period total, in percent"
    )


class PeriodSummary(BaseModel):
    """Derived figures for one time window."""

    description: str
    generated_at: datetime
    record_count: int = Field(ge=0)
    total: Decimal
    daily_average: Decimal
    categories: list[CategoryShare] = Field(
        default_factory=list,
        description="All categories with spending, largest first"
    )
    top: list[CategoryShare] = Field(
        default_factory=list,
        description="The first `limit` entries of `categories`"
    )

    @property
    def is_empty(self) -> bool:
        return self.record_count == 0
