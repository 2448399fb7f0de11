"""Aggregation view package."""

from expense_ledger.queries.aggregation import (
    breakdown_for,
    newest_first,
    percentage_of,
    records_in,
    top_categories,
    total_for,
)
from expense_ledger.queries.summary import summarize

__all__ = [
    "breakdown_for",
    "newest_first",
    "percentage_of",
    "records_in",
    "summarize",
    "top_categories",
    "total_for",
]
