"""Expense entry and bulk import workflows."""

from .bulk_import import BulkImportRequest, BulkImportResult, run_bulk_import
from .entry import (
    ExpenseEntryError,
    ExpenseEntryRequest,
    ExpenseEntryResult,
    build_manual_expense,
    run_expense_entry,
)

__all__ = [
    "BulkImportRequest",
    "BulkImportResult",
    "ExpenseEntryError",
    "ExpenseEntryRequest",
    "ExpenseEntryResult",
    "build_manual_expense",
    "run_bulk_import",
    "run_expense_entry",
]
