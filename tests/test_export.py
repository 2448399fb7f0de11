"""
Tests for the CSV export.
"""

import io
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pandas as pd

from expense_ledger.audit import AuditLogger
from expense_ledger.models import AuditEventType, ExpenseCategory, Record
from expense_ledger.services.export import EXPORT_COLUMNS, ExportService, export_filename


ICT = timezone(timedelta(hours=7))


def make_records():
    return (
        Record(
            id="a",
            amount=Decimal("50000"),
            category=ExpenseCategory.FOOD,
            timestamp=datetime(2024, 3, 14, 20, 15, tzinfo=timezone.utc),
            note="phở",
        ),
        Record(
            id="b",
            amount=Decimal("20000"),
            category=ExpenseCategory.TRANSPORT,
            timestamp=datetime(2024, 3, 15, 1, 0, tzinfo=timezone.utc),
            note=None,
        ),
    )


class TestExportCsv:
    """Tests for CSV generation."""

    def test_has_bom_and_header(self):
        """Test that the file starts with a BOM and the header row."""
        buffer = ExportService().export_csv(make_records(), tz=ICT)
        raw = buffer.getvalue()
        assert raw.startswith(b"\xef\xbb\xbf")
        header = raw.decode("utf-8-sig").splitlines()[0]
        assert header.split(",") == EXPORT_COLUMNS

    def test_one_row_per_record(self):
        """Test row contents, in the given timezone."""
        buffer = ExportService().export_csv(make_records(), tz=ICT)
        df = pd.read_csv(buffer, encoding="utf-8-sig", dtype=str, keep_default_na=False)

        assert len(df) == 2
        first = df.iloc[0]
        assert first["id"] == "a"
        assert first["date"] == "2024-03-15"
        assert first["time"] == "03:15:00"
        assert first["category"] == "food"
        assert first["category_label"] == ExpenseCategory.FOOD.label
        assert first["amount"] == "50000"
        assert first["note"] == "phở"
        assert df.iloc[1]["note"] == ""

    def test_empty_export_keeps_header(self):
        """Test that an empty ledger still exports the header."""
        buffer = ExportService().export_csv(())
        lines = buffer.getvalue().decode("utf-8-sig").splitlines()
        assert lines == [",".join(EXPORT_COLUMNS)]

    def test_buffer_is_rewound(self):
        """Test that the buffer is ready to be read."""
        buffer = ExportService().export_csv(make_records())
        assert isinstance(buffer, io.BytesIO)
        assert buffer.tell() == 0

    def test_building_the_file_is_not_logged(self):
        """Test that rendering the export on every page view logs nothing."""
        audit_logger = AuditLogger()
        exporter = ExportService(audit_logger=audit_logger)
        for _ in range(3):
            exporter.export_csv(make_records())
        assert audit_logger.recent() == []


class TestRecordDownload:
    """Tests for auditing downloads."""

    def test_download_is_logged_with_given_filename(self):
        """Test that the logged file name is the one offered for download."""
        audit_logger = AuditLogger()
        filename = export_filename(datetime(2024, 3, 15, 23, 30, tzinfo=ICT))
        ExportService(audit_logger=audit_logger).record_download(2, filename)

        event = audit_logger.recent(limit=1)[0]
        assert event.event_type == AuditEventType.EXPORT_GENERATED
        assert event.entity_id == "expenses_2024-03-15.csv"
        assert event.details["record_count"] == 2


class TestExportFilename:
    """Tests for the download file name."""

    def test_filename_uses_date(self):
        """Test the dated file name."""
        assert export_filename(datetime(2024, 3, 5, 9, tzinfo=ICT)) == "expenses_2024-03-05.csv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
