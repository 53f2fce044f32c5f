"""Turn table body rows into expense records with row-level problems."""

from dataclasses import dataclass
from decimal import Decimal

from tallybook.domain.expense import DEFAULT_CATEGORY, ExpenseRecord, PricingUnit, round_money, round_quantity

from .cells import parse_currency, parse_qty, parse_unit_price
from .columns import ColumnMap, ColumnRole
from .common import SUMMARY_ROWS, ZERO, _strip_bold


@dataclass(frozen=True)
class BuiltRow:
    """A record built from one body row and the problems found on it."""

    record: ExpenseRecord
    problems: tuple[str, ...] = ()


def is_summary_row(item_cell: str) -> bool:
    """Return True for receipt summary rows such as **SUBTOTAL** or CASH PAID."""
    if not item_cell:
        return False
    normalized = item_cell.replace("*", "").strip().upper()
    return any(normalized.startswith(marker) for marker in SUMMARY_ROWS)


def _unit_mismatch(price_unit: PricingUnit, qty_unit: PricingUnit) -> bool:
    if price_unit is PricingUnit.BY_WEIGHT:
        return qty_unit is not PricingUnit.BY_WEIGHT
    if price_unit is PricingUnit.EACH:
        return qty_unit is not PricingUnit.EACH
    raise ValueError(f"Unknown pricing unit: {price_unit!r}")


def build_row(cells: list[str], columns: ColumnMap) -> BuiltRow | None:
    """
    Build a record from one body row.

    Returns None for rows that are skipped without comment: summary rows
    and rows whose item is blank. Every other row yields a record, even
    when it has problems; problems are advisory.

    On a unit mismatch the quantity used for pricing is 0, so a per-pound
    price is never multiplied by an item count (or the reverse). The stored
    ``qty`` still holds the parsed quantity.
    """
    item_cell = columns.cell(cells, ColumnRole.ITEM)
    if is_summary_row(item_cell):
        return None

    item = _strip_bold(item_cell)
    if not item:
        return None

    category = _strip_bold(columns.cell(cells, ColumnRole.CATEGORY) or DEFAULT_CATEGORY)
    store = _strip_bold(columns.cell(cells, ColumnRole.STORE))
    date = _strip_bold(columns.cell(cells, ColumnRole.DATE))

    price_per_unit, price_unit = parse_unit_price(columns.cell(cells, ColumnRole.UNIT_PRICE))
    parsed_qty, qty_unit = parse_qty(columns.cell(cells, ColumnRole.QUANTITY))

    mismatch = _unit_mismatch(price_unit, qty_unit)
    effective_qty = ZERO if mismatch else parsed_qty

    explicit_price = parse_currency(columns.cell(cells, ColumnRole.PRICE))
    if explicit_price > 0:
        price = explicit_price
    else:
        price = _computed_price(price_per_unit, effective_qty)

    problems: list[str] = []
    if not date:
        problems.append("Missing date")
    if price_per_unit <= 0:
        problems.append("Invalid unit price")
    if effective_qty <= 0:
        problems.append("Invalid qty/weight")
    if mismatch:
        problems.append(f"Qty unit ({qty_unit.value}) doesn't match unit price ({price_unit.value})")

    record = ExpenseRecord(
        item=item,
        category=category,
        store=store,
        date=date,
        unit_price=round_money(price_per_unit),
        qty=round_quantity(parsed_qty),
        price=round_money(price),
        pricing_unit=price_unit,
    )
    return BuiltRow(record=record, problems=tuple(problems))


def _computed_price(price_per_unit: Decimal, qty: Decimal) -> Decimal:
    if price_per_unit == 0 or qty == 0:
        return ZERO
    product = price_per_unit * qty
    if not product.is_finite():
        return ZERO
    return round_money(product)
