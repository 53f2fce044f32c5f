"""Core domain models for tallybook.

This module provides the data models used throughout the project:
- ExpenseRecord, PricingUnit: a purchased item and how it was priced
- Diagnostic, ParseResult: output of a Markdown table import

Usage:
    from tallybook.domain import ExpenseRecord, ParseResult, PricingUnit
"""

from tallybook.domain.expense import (
    DEFAULT_CATEGORY,
    Diagnostic,
    ExpenseRecord,
    ParseResult,
    PricingUnit,
    round_money,
    round_quantity,
)

__all__ = [
    "DEFAULT_CATEGORY",
    "Diagnostic",
    "ExpenseRecord",
    "ParseResult",
    "PricingUnit",
    "round_money",
    "round_quantity",
]
