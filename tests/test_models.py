"""
Tests for the Expense Ledger models

Test strategy:
1. Unit tests for individual models (records, windows, results)
2. Store, intake and aggregation tests live in their own modules
3. No real disk access outside pytest's tmp_path
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from pydantic import ValidationError

from expense_ledger.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    CategoryShare,
    ExpenseCandidate,
    ExpenseCategory,
    IntakeErrorCode,
    IntakeResult,
    PeriodSummary,
    Record,
    TimeWindow,
    ValidationIssue,
    WindowKind,
    format_instant,
    to_millisecond_utc,
)


ICT = timezone(timedelta(hours=7))


class TestExpenseCategory:
    """Tests for the category enumeration."""

    def test_all_categories_exist(self):
        """Test that the expected category codes exist."""
        codes = {c.value for c in ExpenseCategory}
        assert {"food", "transport", "utilities", "education", "other"} <= codes
        assert len(codes) == 12

    def test_every_category_has_label_and_icon(self):
        """Test that each category can be displayed."""
        for category in ExpenseCategory:
            assert category.label
            assert category.icon

    def test_parse_ignores_case_and_whitespace(self):
        """Test that parse normalizes raw codes."""
        assert ExpenseCategory.parse("  Food ") == ExpenseCategory.FOOD
        assert ExpenseCategory.parse("TRANSPORT") == ExpenseCategory.TRANSPORT

    def test_parse_rejects_unknown_and_empty(self):
        """Test that parse returns None for anything unrecognized."""
        assert ExpenseCategory.parse("") is None
        assert ExpenseCategory.parse("   ") is None
        assert ExpenseCategory.parse("gambling") is None
        assert ExpenseCategory.parse(None) is None
        assert ExpenseCategory.parse(3) is None


class TestInstants:
    """Tests for timestamp normalization."""

    def test_truncates_to_milliseconds(self):
        """Test that microseconds below a millisecond are dropped."""
        value = datetime(2024, 3, 5, 10, 0, 0, 123456, tzinfo=timezone.utc)
        assert to_millisecond_utc(value).microsecond == 123000

    def test_converts_to_utc(self):
        """Test that aware instants are converted to UTC."""
        value = datetime(2024, 3, 5, 7, 0, tzinfo=ICT)
        result = to_millisecond_utc(value)
        assert result.tzinfo == timezone.utc
        assert result.hour == 0

    def test_naive_is_read_as_utc(self):
        """Test that naive datetimes are treated as UTC."""
        result = to_millisecond_utc(datetime(2024, 3, 5, 10, 0))
        assert result == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)

    def test_format_instant(self):
        """Test the persisted ISO form with milliseconds and Z."""
        value = datetime(2024, 3, 5, 10, 0, 0, 7000, tzinfo=timezone.utc)
        assert format_instant(value) == "2024-03-05T10:00:00.007Z"


class TestRecordModels:
    """Tests for ExpenseCandidate and Record."""

    def test_candidate_creation(self):
        """Test ExpenseCandidate model creation."""
        candidate = ExpenseCandidate(
            amount=Decimal("50000"),
            category=ExpenseCategory.FOOD,
            note="  lunch  ",
        )
        assert candidate.amount == Decimal("50000")
        assert candidate.note == "lunch"

    def test_candidate_empty_note_becomes_absent(self):
        """Test that a blank note is stored as None."""
        candidate = ExpenseCandidate(
            amount=Decimal("1"),
            category=ExpenseCategory.OTHER,
            note="   ",
        )
        assert candidate.note is None

    def test_candidate_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in (Decimal("0"), Decimal("-5")):
            with pytest.raises(ValidationError):
                ExpenseCandidate(amount=amount, category=ExpenseCategory.FOOD)

    def test_record_accepts_date_alias(self):
        """Test that the persisted 'date' key populates timestamp."""
        record = Record.model_validate({
            "id": "abc",
            "amount": 20000,
            "category": "transport",
            "date": "2024-03-05T10:00:00.000Z",
        })
        assert record.timestamp == datetime(2024, 3, 5, 10, tzinfo=timezone.utc)
        assert record.category == ExpenseCategory.TRANSPORT
        assert record.note is None

    def test_record_rejects_unknown_category(self):
        """Test that unknown category codes are not representable."""
        with pytest.raises(ValidationError):
            Record.model_validate({
                "id": "abc",
                "amount": 1,
                "category": "gambling",
                "date": "2024-03-05T10:00:00.000Z",
            })

    def test_record_is_frozen(self):
        """Test that records cannot be edited in place."""
        record = Record(
            id="abc",
            amount=Decimal("1"),
            category=ExpenseCategory.FOOD,
            timestamp=datetime(2024, 3, 5, tzinfo=timezone.utc),
        )
        with pytest.raises(ValidationError):
            record.amount = Decimal("2")

    def test_to_storage_dict(self):
        """Test the persisted layout of a record."""
        record = Record(
            id="abc",
            amount=Decimal("50000"),
            category=ExpenseCategory.FOOD,
            timestamp=datetime(2024, 3, 5, 10, tzinfo=timezone.utc),
            note="pho",
        )
        assert record.to_storage_dict() == {
            "id": "abc",
            "amount": 50000,
            "category": "food",
            "date": "2024-03-05T10:00:00.000Z",
            "note": "pho",
        }

    def test_to_storage_dict_omits_absent_note(self):
        """Test that note is left out when absent."""
        record = Record(
            id="abc",
            amount=Decimal("12.5"),
            category=ExpenseCategory.FOOD,
            timestamp=datetime(2024, 3, 5, 10, tzinfo=timezone.utc),
        )
        data = record.to_storage_dict()
        assert "note" not in data
        assert data["amount"] == 12.5

    def test_local_date(self):
        """Test that the calendar date depends on the timezone."""
        record = Record(
            id="abc",
            amount=Decimal("1"),
            category=ExpenseCategory.FOOD,
            timestamp=datetime(2024, 3, 5, 20, tzinfo=timezone.utc),
        )
        assert record.local_date(timezone.utc) == date(2024, 3, 5)
        assert record.local_date(ICT) == date(2024, 3, 6)


class TestTimeWindow:
    """Tests for TimeWindow construction and evaluation."""

    NOW = datetime(2024, 3, 15, 12, 0, tzinfo=ICT)

    def test_trailing_window_requires_days(self):
        """Test that a trailing window without a length is rejected."""
        with pytest.raises(ValidationError):
            TimeWindow(kind=WindowKind.TRAILING_DAYS)

    def test_month_requires_year_and_month_together(self):
        """Test that a half-specified month is rejected."""
        with pytest.raises(ValidationError):
            TimeWindow(kind=WindowKind.CALENDAR_MONTH, year=2024)

    def test_today_and_yesterday(self):
        """Test relative day windows."""
        assert TimeWindow.today().target_day(self.NOW) == date(2024, 3, 15)
        assert TimeWindow.yesterday().target_day(self.NOW) == date(2024, 3, 14)

    def test_day_uses_timezone_of_now(self):
        """Test that 'today' is the local calendar day of now."""
        late_utc = datetime(2024, 3, 14, 18, 0, tzinfo=timezone.utc)  # 01:00 on the 15th in ICT
        assert TimeWindow.today().contains(late_utc, self.NOW)
        assert not TimeWindow.yesterday().contains(late_utc, self.NOW)

    def test_span_days(self):
        """Test the number of days each window spans."""
        assert TimeWindow.today().span_days(self.NOW) == 1
        assert TimeWindow.trailing_days(7).span_days(self.NOW) == 7
        assert TimeWindow.calendar_month().span_days(self.NOW) == 31
        assert TimeWindow.calendar_month(2024, 2).span_days(self.NOW) == 29

    def test_describe(self):
        """Test human-readable window descriptions."""
        assert TimeWindow.today().describe(self.NOW) == "today"
        assert TimeWindow.trailing_days(7).describe(self.NOW) == "last 7 days"
        assert TimeWindow.calendar_month().describe(self.NOW) == "in March 2024"


class TestResultModels:
    """Tests for intake and summary result models."""

    def test_intake_result_with_issues(self):
        """Test that issues make a result invalid."""
        result = IntakeResult(issues=[
            ValidationIssue(
                field="amount",
                code=IntakeErrorCode.INVALID_AMOUNT,
                message="Amount must be greater than zero",
                raw_value="-5",
            ),
        ])
        assert not result.is_valid
        assert not result.saved
        assert result.codes == {IntakeErrorCode.INVALID_AMOUNT}
        assert result.issue_for("amount").raw_value == "-5"
        assert result.issue_for("category") is None

    def test_category_share_percentage_bounds(self):
        """Test that percentages stay within 0-100."""
        with pytest.raises(ValidationError):
            CategoryShare(
                category=ExpenseCategory.FOOD,
                total=Decimal("1"),
                percentage=101.0,
            )

    def test_period_summary_is_empty(self):
        """Test the empty flag of a summary."""
        summary = PeriodSummary(
            description="today",
            generated_at=datetime.now(timezone.utc),
            record_count=0,
            total=Decimal("0"),
            daily_average=Decimal("0"),
        )
        assert summary.is_empty


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.RECORD_APPENDED,
            description="Expense recorded",
        )
        assert event.event_id is not None
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to a log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            severity=AuditSeverity.INFO,
            entity_id="transactions_v1",
            description="Loaded",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "snapshot_loaded"
        assert log_dict["entity_id"] == "transactions_v1"

    def test_builder_write_failed(self):
        """Test that write failures are error-level events."""
        event = AuditEventBuilder.persistence_write_failed(
            "transactions_v1", "append", "Quota exceeded"
        )
        assert event.event_type == AuditEventType.PERSISTENCE_WRITE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "Quota exceeded"

    def test_builder_malformed_record(self):
        """Test that dropped entries keep a trace of the raw value."""
        event = AuditEventBuilder.malformed_record_dropped(
            "transactions_v1", 2, "amount is not a number", {"amount": "x"}
        )
        assert event.event_type == AuditEventType.MALFORMED_RECORD_DROPPED
        assert event.details["position"] == 2
        assert "amount" in event.details["raw_entry"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
