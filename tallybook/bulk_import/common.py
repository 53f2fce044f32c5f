"""Shared constants and helpers for Markdown table import."""

import re
from decimal import Decimal, InvalidOperation

CELL_DELIMITER = "|"

# Receipt artifacts that show up as rows in pasted tables; matched as prefixes.
SUMMARY_ROWS = (
    "SUBTOTAL",
    "SALES TAX",
    "TAX",
    "TOTAL",
    "CASH",
    "CASH PAID",
    "CHANGE",
)

# Alignment rows look like "|---|:---:|---:|" once whitespace is removed.
ALIGNMENT_ROW_PATTERN = re.compile(r"^[:\-|]+$")

# Leading decimal literal, same shape parseFloat-style readers accept.
LEADING_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# First run of digits/dots in a quantity cell, e.g. "0.560 lb" -> "0.560".
QUANTITY_NUMBER_PATTERN = re.compile(r"[\d.]+")

# "$10.99 / lb", "$10.99/lb", "$10.99 per lb"
BY_WEIGHT_PRICE_PATTERNS = (
    re.compile(r"/\s*lb"),
    re.compile(r"\bper\s*lb\b"),
)
EACH_PRICE_PATTERN = re.compile(r"\beach\b")
BY_WEIGHT_QTY_PATTERN = re.compile(r"\blb\b")

ZERO = Decimal("0")
MAX_NUMBER_DIGITS = 12


def _parse_leading_number(text: str) -> Decimal:
    """
    Read the decimal literal at the start of text.

    Trailing text is ignored ("3.77 each" -> 3.77); anything without a
    leading number yields 0.
    """
    match = LEADING_NUMBER_PATTERN.match(text.strip())
    if not match:
        return ZERO
    try:
        value = Decimal(match.group(0))
    except InvalidOperation:
        return ZERO
    # 10**13 and above read as 0 so price * qty stays within Decimal precision at cents.
    if not value.is_finite() or value.adjusted() > MAX_NUMBER_DIGITS:
        return ZERO
    return value


def _strip_bold(text: str) -> str:
    """Remove Markdown ``**`` markers and surrounding whitespace."""
    return text.replace("**", "").strip()
