"""
Expense Ledger - Source Package

A small household expense tracker: record what was spent, see today's
running total, browse past periods and export everything to a
spreadsheet.

DESIGN PRINCIPLES:
1. One store owns the records; everything else reads snapshots
2. Aggregates are derived, never stored
3. Invalid input is reported field by field, never silently fixed
4. Persistence failures are visible, never silent
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"
