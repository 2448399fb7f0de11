"""
Aggregation View

DESIGN DECISION: Aggregates are DERIVED, never stored.
Every figure is recomputed from a store snapshot on demand, so there is
no cached total that can drift from the records it summarizes.

All functions are pure: they take a snapshot, a window and a reference
instant, and never touch the store or the byte store.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from expense_ledger.models.record import ExpenseCategory, Record
from expense_ledger.models.results import CategoryTotal
from expense_ledger.models.window import TimeWindow, local_now


Number = Union[Decimal, int, float]


def records_in(
    records: Iterable[Record],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> list[Record]:
    """Records whose timestamp falls inside the window, in snapshot order."""
    now = now or local_now()
    return [r for r in records if window.contains(r.timestamp, now)]


def total_for(
    records: Iterable[Record],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> Decimal:
    """
    Sum of amounts inside the window.

    Returns:
        The total, Decimal("0") when nothing matches
    """
    return sum((r.amount for r in records_in(records, window, now)), Decimal("0"))


def breakdown_for(
    records: Iterable[Record],
    window: TimeWindow,
    now: Optional[datetime] = None,
) -> dict[ExpenseCategory, Decimal]:
    """
    Per-category sums inside the window.

    Categories without a matching record are absent, so the values always
    add up to total_for() over the same window.
    """
    totals: dict[ExpenseCategory, Decimal] = {}
    for record in records_in(records, window, now):
        totals[record.category] = totals.get(record.category, Decimal("0")) + record.amount
    return totals


def top_categories(
    records: Iterable[Record],
    window: TimeWindow,
    limit: int = 5,
    now: Optional[datetime] = None,
) -> list[CategoryTotal]:
    """
    Largest categories inside the window.

    Sorted by descending sum; equal sums are ordered by category code so
    the result is deterministic.

    Args:
        records: Snapshot to aggregate
        window: Time window to aggregate over
        limit: Maximum number of categories returned
        now: Reference instant, defaults to the current local time

    Returns:
        At most `limit` CategoryTotal items
    """
    if limit <= 0:
        return []
    ranked = sorted(
        breakdown_for(records, window, now).items(),
        key=lambda item: (-item[1], item[0].value),
    )
    return [
        CategoryTotal(category=category, total=total)
        for category, total in ranked[:limit]
    ]


def percentage_of(category_sum: Number, total: Number) -> float:
    """Share of `total` taken by `category_sum`, in percent. 0.0 for a zero total."""
    total = Decimal(str(total))
    if total == 0:
        return 0.0
    return float(Decimal(str(category_sum)) / total * 100)


def newest_first(records: Iterable[Record]) -> list[Record]:
    """Records by timestamp descending. Equal timestamps keep snapshot order."""
    return sorted(records, key=lambda r: r.timestamp, reverse=True)
