"""Entry intake package."""

from expense_ledger.validation.intake import EntryIntake, parse_amount

__all__ = ["EntryIntake", "parse_amount"]
