"""Data models for expense records and bulk-import parse results."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

DEFAULT_CATEGORY = "Other"

CENTS = Decimal("0.01")
THOUSANDTHS = Decimal("0.001")


class PricingUnit(Enum):
    """How a unit price is charged: per item or per pound."""

    EACH = "each"
    BY_WEIGHT = "lb"

    def __str__(self) -> str:
        return self.value


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def round_quantity(value: Decimal) -> Decimal:
    """Round a quantity/weight to three decimal places."""
    return value.quantize(THOUSANDTHS, rounding=ROUND_HALF_UP)


def _as_decimal(value: Any) -> Decimal:
    # Stored collections may come from older files with numbers, strings or nulls.
    if value is None or value == "":
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")


@dataclass(frozen=True)
class ExpenseRecord:
    """A single purchased item."""

    item: str
    category: str
    store: str
    date: str  # carried through verbatim, usually YYYY-MM-DD
    unit_price: Decimal
    qty: Decimal
    price: Decimal
    pricing_unit: PricingUnit = PricingUnit.EACH

    def to_dict(self) -> dict[str, str]:
        return {
            "item": self.item,
            "category": self.category,
            "store": self.store,
            "date": self.date,
            "unit_price": str(self.unit_price),
            "qty": str(self.qty),
            "price": str(self.price),
            "pricing_unit": self.pricing_unit.value,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ExpenseRecord":
        try:
            pricing_unit = PricingUnit(raw.get("pricing_unit") or PricingUnit.EACH.value)
        except ValueError:
            pricing_unit = PricingUnit.EACH
        return cls(
            item=str(raw.get("item") or ""),
            category=str(raw.get("category") or DEFAULT_CATEGORY),
            store=str(raw.get("store") or ""),
            date=str(raw.get("date") or ""),
            unit_price=_as_decimal(raw.get("unit_price")),
            qty=_as_decimal(raw.get("qty")),
            price=_as_decimal(raw.get("price")),
            pricing_unit=pricing_unit,
        )


@dataclass(frozen=True)
class Diagnostic:
    """Parser message, either table-wide (row is None) or tied to a body row."""

    message: str
    row: int | None = None  # 1-based position among body rows

    @property
    def is_global(self) -> bool:
        return self.row is None

    def __str__(self) -> str:
        if self.row is None:
            return self.message
        return f"Row {self.row}: {self.message}"


@dataclass(frozen=True)
class ParseResult:
    """Records and diagnostics produced by one bulk-import parse."""

    records: tuple[ExpenseRecord, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def errors(self) -> list[str]:
        """Diagnostics rendered for display, in order."""
        return [str(diagnostic) for diagnostic in self.diagnostics]

    @property
    def total(self) -> Decimal:
        return round_money(sum((record.price for record in self.records), Decimal("0")))
