"""Tests for the manual entry and bulk import workflows."""

from collections.abc import Sequence
from decimal import Decimal
from pathlib import Path

import pytest

from tallybook.application.expenses import (
    BulkImportRequest,
    ExpenseEntryError,
    ExpenseEntryRequest,
    build_manual_expense,
    run_bulk_import,
    run_expense_entry,
)
from tallybook.domain.expense import ExpenseRecord, PricingUnit
from tallybook.runtime.expense_storage import load_expenses

TABLE = """
| Item | Category | Store | Date | Unit Price | Qty | Price |
|---|---|---|---|---|---|---|
| Milk | Dairy | Walmart | 2024-01-05 | $3.49 each | 2 | |
| Eggs | Dairy | Walmart | | $4.00 each | 1 | |
| TOTAL | | | | | | $10.98 |
"""


def test_build_manual_expense_computes_price() -> None:
    record = build_manual_expense(
        ExpenseEntryRequest(item=" Milk ", date="2024-01-05", unit_price="3.495", qty="3", store=" Walmart ")
    )

    assert record.item == "Milk"
    assert record.store == "Walmart"
    assert record.category == "Other"
    assert record.unit_price == Decimal("3.50")
    assert record.qty == Decimal("3")
    # Price uses the unrounded unit price: 3.495 * 3 = 10.485
    assert record.price == Decimal("10.49")
    assert record.pricing_unit is PricingUnit.EACH


@pytest.mark.parametrize(
    ("request_kwargs", "message"),
    [
        ({"item": "  ", "date": "2024-01-05"}, "Item is required"),
        ({"item": "Milk", "date": ""}, "Date is required"),
        ({"item": "Milk", "date": "2024-01-05", "unit_price": "abc"}, "Unit price must be a number"),
        ({"item": "Milk", "date": "2024-01-05", "unit_price": "-1"}, "Unit price cannot be negative"),
        ({"item": "Milk", "date": "2024-01-05", "qty": "1.5"}, "Qty must be a whole number"),
        ({"item": "Milk", "date": "2024-01-05", "qty": "-2"}, "Qty cannot be negative"),
        ({"item": "Milk", "date": "2024-01-05", "qty": "NaN"}, "Qty must be a finite number"),
    ],
)
def test_build_manual_expense_rejects_bad_values(request_kwargs: dict, message: str) -> None:
    with pytest.raises(ExpenseEntryError, match=message):
        build_manual_expense(ExpenseEntryRequest(**request_kwargs))


def test_run_expense_entry_saves_and_returns_index(tmp_path: Path) -> None:
    path = tmp_path / "expenses.json"

    first = run_expense_entry(ExpenseEntryRequest(item="Milk", date="2024-01-05", unit_price="3"), path)
    second = run_expense_entry(ExpenseEntryRequest(item="Eggs", date="2024-01-05", unit_price="4"), path)

    assert first.status == "saved"
    assert first.index == 0
    assert second.index == 1
    assert [record.item for record in load_expenses(path)] == ["Milk", "Eggs"]


def test_run_expense_entry_invalid_does_not_touch_storage(tmp_path: Path) -> None:
    path = tmp_path / "expenses.json"

    result = run_expense_entry(ExpenseEntryRequest(item="", date="2024-01-05"), path)

    assert result.status == "invalid"
    assert result.error == "Item is required"
    assert result.record is None
    assert not path.exists()


def test_bulk_import_preview_does_not_call_sink() -> None:
    calls: list[Sequence[ExpenseRecord]] = []

    def sink(records: Sequence[ExpenseRecord]) -> int:
        calls.append(records)
        return len(records)

    result = run_bulk_import(BulkImportRequest(text=TABLE), sink=sink)

    assert result.status == "preview"
    assert [record.item for record in result.records] == ["Milk", "Eggs"]
    assert result.errors == ["Row 2: Missing date"]
    assert calls == []


def test_bulk_import_apply_hands_every_record_to_sink() -> None:
    calls: list[Sequence[ExpenseRecord]] = []

    def sink(records: Sequence[ExpenseRecord]) -> int:
        calls.append(records)
        return 40 + len(records)

    result = run_bulk_import(BulkImportRequest(text=TABLE, apply=True), sink=sink)

    assert result.status == "imported"
    assert result.stored_count == 42
    assert len(calls) == 1
    assert [record.item for record in calls[0]] == ["Milk", "Eggs"]
    assert calls[0][0].price == Decimal("6.98")


def test_bulk_import_apply_defaults_to_storage() -> None:
    result = run_bulk_import(BulkImportRequest(text=TABLE, apply=True))

    assert result.stored_count == 2
    assert [record.item for record in load_expenses()] == ["Milk", "Eggs"]


def test_bulk_import_with_no_records_is_empty() -> None:
    result = run_bulk_import(BulkImportRequest(text="nothing here", apply=True), sink=lambda records: 1 / 0)

    assert result.status == "empty"
    assert result.stored_count is None
    assert result.errors == ["No markdown table found."]
