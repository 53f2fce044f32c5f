"""Value parsers for individual table cells.

None of these raise: unreadable input becomes 0 and callers treat a zero
as missing/invalid where it matters.
"""

from decimal import Decimal

from tallybook.domain.expense import PricingUnit

from .common import (
    BY_WEIGHT_PRICE_PATTERNS,
    BY_WEIGHT_QTY_PATTERN,
    EACH_PRICE_PATTERN,
    QUANTITY_NUMBER_PATTERN,
    ZERO,
    _parse_leading_number,
)


def parse_currency(text: str | None) -> Decimal:
    """
    Parse a money cell.

    "**$1,234.50**" -> 1234.50
    "$3.77 each"    -> 3.77
    "" / "n/a"      -> 0
    """
    if not text:
        return ZERO
    clean = text.replace("*", "").replace("$", "").replace(",", "").strip()
    return _parse_leading_number(clean)


def parse_unit_price(text: str | None) -> tuple[Decimal, PricingUnit]:
    """
    Parse a unit price cell into (price per unit, unit).

    "$3.77 each"    -> (3.77, EACH)
    "$10.99 / lb"   -> (10.99, BY_WEIGHT)
    "3.50"          -> (3.50, EACH)
    """
    if not text:
        return ZERO, PricingUnit.EACH
    raw = text.replace("*", "").strip().lower()
    price = parse_currency(raw)
    if any(pattern.search(raw) for pattern in BY_WEIGHT_PRICE_PATTERNS):
        return price, PricingUnit.BY_WEIGHT
    if EACH_PRICE_PATTERN.search(raw):
        return price, PricingUnit.EACH
    return price, PricingUnit.EACH


def parse_qty(text: str | None) -> tuple[Decimal, PricingUnit]:
    """
    Parse a quantity/weight cell into (magnitude, unit).

    "1"        -> (1, EACH)
    "0.560 lb" -> (0.560, BY_WEIGHT)
    "x2"       -> (2, EACH)
    """
    if not text:
        return ZERO, PricingUnit.EACH
    raw = text.replace("*", "").strip().lower()
    match = QUANTITY_NUMBER_PATTERN.search(raw)
    qty = _parse_leading_number(match.group(0)) if match else ZERO
    unit = PricingUnit.BY_WEIGHT if BY_WEIGHT_QTY_PATTERN.search(raw) else PricingUnit.EACH
    return qty, unit
