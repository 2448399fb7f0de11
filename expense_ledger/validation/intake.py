"""
Entry Intake

DESIGN DECISION: Every field is validated independently.
A form with a bad amount AND a bad category reports both problems at
once, so the user fixes everything in one round trip instead of
discovering errors one at a time.

Rejections are RETURNED, never raised. They are expected user input,
not failures of the system. Intake never talks to the byte store; a
valid candidate is handed to the RecordStore and nothing else.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from expense_ledger.audit import AuditLogger
from expense_ledger.models.record import (
    AMOUNT_QUANTUM,
    MAX_AMOUNT,
    ExpenseCandidate,
    ExpenseCategory,
)
from expense_ledger.models.results import (
    IntakeErrorCode,
    IntakeResult,
    ValidationIssue,
)
from expense_ledger.services.storage import RecordStore


def _raw(value: object) -> Optional[str]:
    return None if value is None else str(value)


def parse_amount(value: object) -> Optional[Decimal]:
    """
    Parse a user-supplied amount.

    Accepts numbers and numeric strings. Booleans, blanks, NaN and
    infinities are not amounts.

    Returns:
        The Decimal value, or None if it cannot be parsed
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    return amount if amount.is_finite() else None


class EntryIntake:
    """
    Validates raw form input and forwards valid expenses to the store.
    """

    def __init__(
        self,
        store: RecordStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize intake.

        Args:
            store: Store that receives valid candidates
            audit_logger: Receives one event per rejected submission
        """
        self._store = store
        self._audit = audit_logger or AuditLogger()

    def validate(
        self,
        amount: object,
        category: object,
        note: Optional[str] = None,
    ) -> IntakeResult:
        """
        Validate one submission without saving it.

        Args:
            amount: Raw amount (string from a form, or a number)
            category: Raw category code
            note: Optional free text

        Returns:
            IntakeResult with every issue found, or the normalized candidate
        """
        issues: list[ValidationIssue] = []

        parsed_amount = parse_amount(amount)
        if parsed_amount is None:
            issues.append(ValidationIssue(
                field="amount",
                code=IntakeErrorCode.INVALID_AMOUNT,
                message="Amount must be a number",
                raw_value=_raw(amount),
            ))
        elif parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                code=IntakeErrorCode.INVALID_AMOUNT,
                message="Amount must be greater than zero",
                raw_value=_raw(amount),
            ))
        elif parsed_amount > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                code=IntakeErrorCode.INVALID_AMOUNT,
                message="Amount is too large",
                raw_value=_raw(amount),
            ))
        else:
            parsed_amount = parsed_amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
            if not 0 < parsed_amount <= MAX_AMOUNT:
                issues.append(ValidationIssue(
                    field="amount",
                    code=IntakeErrorCode.INVALID_AMOUNT,
                    message="Amount is too small" if parsed_amount <= 0 else "Amount is too large",
                    raw_value=_raw(amount),
                ))

        parsed_category = ExpenseCategory.parse(category)
        if parsed_category is None:
            blank = category is None or (isinstance(category, str) and not category.strip())
            issues.append(ValidationIssue(
                field="category",
                code=IntakeErrorCode.INVALID_CATEGORY,
                message="Please choose a category" if blank else f"Unknown category: {category}",
                raw_value=_raw(category),
            ))

        if issues:
            return IntakeResult(issues=issues)

        return IntakeResult(candidate=ExpenseCandidate(
            amount=parsed_amount,
            category=parsed_category,
            note=note,
        ))

    def submit(
        self,
        amount: object,
        category: object,
        note: Optional[str] = None,
    ) -> IntakeResult:
        """
        Validate one submission and, if valid, append it to the store.

        Returns:
            IntakeResult carrying either the issues or the saved Record
        """
        result = self.validate(amount, category, note)
        if not result.is_valid:
            self._audit.log_entry_rejected(
                [issue.model_dump(mode="json") for issue in result.issues]
            )
            return result

        record = self._store.append(result.candidate)
        return result.model_copy(update={"record": record})
