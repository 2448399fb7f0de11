"""
CSV export of the ledger.

Produces a spreadsheet-friendly CSV: UTF-8 with a byte-order mark so
spreadsheet programs detect the encoding, and one row per record with
the timestamp split into local date and time.
"""

import io
from datetime import datetime, tzinfo
from typing import Iterable, Optional

import pandas as pd

from expense_ledger.audit import AuditLogger
from expense_ledger.models.record import Record


EXPORT_COLUMNS = ["id", "date", "time", "category", "category_label", "amount", "note"]


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name for an export made at `now`: expenses_YYYY-MM-DD.csv"""
    now = now or datetime.now().astimezone()
    return f"expenses_{now.strftime('%Y-%m-%d')}.csv"


class ExportService:
    """Generates downloadable CSV exports of the record snapshot."""

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit = audit_logger or AuditLogger()

    def export_csv(
        self,
        records: Iterable[Record],
        tz: Optional[tzinfo] = None,
    ) -> io.BytesIO:
        """
        Export records as a CSV file.

        Args:
            records: Records in the order they should appear
            tz: Timezone for the date and time columns, local time if None

        Returns:
            A BytesIO buffer containing the CSV data, positioned at 0
        """
        data = []
        for record in records:
            local = record.timestamp.astimezone(tz)
            data.append({
                "id": record.id,
                "date": local.strftime("%Y-%m-%d"),
                "time": local.strftime("%H:%M:%S"),
                "category": record.category.value,
                "category_label": record.category.label,
                "amount": record.amount,
                "note": record.note or "",
            })

        df = pd.DataFrame(data, columns=EXPORT_COLUMNS)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        return buffer

    def record_download(self, record_count: int, filename: str) -> None:
        """Audit a download. Building the file alone is not an export."""
        self._audit.log_export_generated(record_count, filename)
