"""
Period summaries.

Bundles the aggregation view into one model per window: count, total,
category shares, the top categories and the average spend per day.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from expense_ledger.models.record import Record
from expense_ledger.models.results import CategoryShare, PeriodSummary
from expense_ledger.models.window import TimeWindow, local_now
from expense_ledger.queries.aggregation import (
    percentage_of,
    records_in,
    top_categories,
)


CENT = Decimal("0.01")


def summarize(
    records: Iterable[Record],
    window: TimeWindow,
    limit: int = 5,
    now: Optional[datetime] = None,
) -> PeriodSummary:
    """
    Summarize the records inside a window.

    The daily average divides the total by the number of calendar days the
    window spans (the whole month for a calendar month, not the days
    elapsed so far).

    Args:
        records: Snapshot to summarize
        window: Time window
        limit: Number of categories in `top`
        now: Reference instant, defaults to the current local time

    Returns:
        PeriodSummary for the window
    """
    now = now or local_now()
    selected = records_in(records, window, now)
    total = sum((r.amount for r in selected), Decimal("0"))

    ranked = top_categories(selected, window, limit=len(selected), now=now)
    shares = [
        CategoryShare(
            category=item.category,
            total=item.total,
            percentage=percentage_of(item.total, total),
        )
        for item in ranked
    ]

    daily_average = (total / window.span_days(now)).quantize(CENT, rounding=ROUND_HALF_UP)

    return PeriodSummary(
        description=window.describe(now),
        generated_at=now,
        record_count=len(selected),
        total=total,
        daily_average=daily_average,
        categories=shares,
        top=shares[:max(limit, 0)],
    )
