"""Single-expense entry workflow."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Literal

from tallybook.domain.expense import DEFAULT_CATEGORY, ExpenseRecord, PricingUnit, round_money
from tallybook.runtime.expense_storage import add_expense
from tallybook.runtime.logging import get_logger

logger = get_logger(__name__)

EntryStatus = Literal["saved", "invalid"]


class ExpenseEntryError(ValueError):
    """Raised when manually entered values cannot form an expense."""


@dataclass(frozen=True)
class ExpenseEntryRequest:
    """Values typed into the add-expense form."""

    item: str
    date: str
    unit_price: Decimal | str | int = 0
    qty: Decimal | str | int = 1
    category: str = ""
    store: str = ""


@dataclass(frozen=True)
class ExpenseEntryResult:
    """Outcome from the add-expense workflow."""

    status: EntryStatus
    record: ExpenseRecord | None = None
    index: int | None = None
    error: str | None = None


def _to_decimal(value: Decimal | str | int, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value).strip() or "0")
    except InvalidOperation as exc:
        raise ExpenseEntryError(f"{field_name} must be a number: {value!r}") from exc
    if not result.is_finite():
        raise ExpenseEntryError(f"{field_name} must be a finite number: {value!r}")
    return result


def build_manual_expense(request: ExpenseEntryRequest) -> ExpenseRecord:
    """
    Validate form values and build the record.

    Item and date are required. Unit price must be non-negative; quantity a
    non-negative whole number. Price is always unit price times quantity.

    Raises:
        ExpenseEntryError: a value is missing or out of range
    """
    item = request.item.strip()
    if not item:
        raise ExpenseEntryError("Item is required")
    date = request.date.strip()
    if not date:
        raise ExpenseEntryError("Date is required")

    unit_price = _to_decimal(request.unit_price, "Unit price")
    if unit_price < 0:
        raise ExpenseEntryError("Unit price cannot be negative")

    qty = _to_decimal(request.qty, "Qty")
    if qty < 0:
        raise ExpenseEntryError("Qty cannot be negative")
    if qty != qty.to_integral_value():
        raise ExpenseEntryError("Qty must be a whole number")

    return ExpenseRecord(
        item=item,
        category=request.category.strip() or DEFAULT_CATEGORY,
        store=request.store.strip(),
        date=date,
        unit_price=round_money(unit_price),
        qty=qty.to_integral_value(),
        price=round_money(unit_price * qty),
        pricing_unit=PricingUnit.EACH,
    )


def run_expense_entry(request: ExpenseEntryRequest, storage_path: Path | None = None) -> ExpenseEntryResult:
    """Build the record and append it to the stored collection."""
    try:
        record = build_manual_expense(request)
    except ExpenseEntryError as exc:
        return ExpenseEntryResult(status="invalid", error=str(exc))

    index = add_expense(record, storage_path)
    logger.info("Added expense at index %d", index)
    return ExpenseEntryResult(status="saved", record=record, index=index)
