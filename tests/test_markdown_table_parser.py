"""Tests for parsing pasted Markdown tables into expense records."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tallybook.bulk_import import parse, parse_markdown_table
from tallybook.domain.expense import Diagnostic, ParseResult, PricingUnit

FULL_TABLE = """
Here is what I bought this week:

| Item | Category | Store | Date | Unit Price | Weight/Qty | Price |
|------|----------|-------|------|-----------:|-----------:|------:|
| **Kosher Salt 16 oz** | Condiments & Spices | Dollar Tree | 2024-01-05 | $1.25 each | 2 | $2.50 |
| Bananas | **Produce (Fruits & Vegetables)** | Walmart | 2024-01-05 | $0.59 / lb | 2.130 lb | |
| Ground Beef | Meat & Poultry | Walmart | 2024-01-05 | $5.49 per lb | 1.5 lb | $8.24 |
| **SUBTOTAL** | | | | | | **$10.74** |
| **TAX** | | | | | | $0.00 |
| **TOTAL** | | | | | | **$10.74** |

Thanks!
"""


def _rows(*lines: str) -> str:
    header = "| Item | Date | Unit Price | Qty | Price |\n|---|---|---|---|---|\n"
    return header + "\n".join(lines)


def test_parses_full_table_and_skips_summary_rows() -> None:
    result = parse_markdown_table(FULL_TABLE)

    assert [record.item for record in result.records] == ["Kosher Salt 16 oz", "Bananas", "Ground Beef"]
    assert result.diagnostics == ()

    salt, bananas, beef = result.records
    assert salt.category == "Condiments & Spices"
    assert salt.store == "Dollar Tree"
    assert salt.date == "2024-01-05"
    assert salt.unit_price == Decimal("1.25")
    assert salt.qty == Decimal("2")
    assert salt.price == Decimal("2.50")
    assert salt.pricing_unit is PricingUnit.EACH

    assert bananas.category == "Produce (Fruits & Vegetables)"
    assert bananas.pricing_unit is PricingUnit.BY_WEIGHT
    assert bananas.qty == Decimal("2.130")
    # 0.59 * 2.13 = 1.2567
    assert bananas.price == Decimal("1.26")

    assert beef.pricing_unit is PricingUnit.BY_WEIGHT
    assert beef.price == Decimal("8.24")


def test_parse_is_repeatable() -> None:
    assert parse_markdown_table(FULL_TABLE) == parse_markdown_table(FULL_TABLE)
    assert parse is parse_markdown_table


@pytest.mark.parametrize(
    "item_cell",
    ["SUBTOTAL", "**TAX**", "total", "Cash", "CASH PAID", "**Change**", "Sales Tax"],
)
def test_summary_rows_produce_no_record_and_no_diagnostic(item_cell: str) -> None:
    result = parse_markdown_table(_rows(f"| {item_cell} | | | | $12.00 |"))

    assert result.records == ()
    assert result.diagnostics == ()


def test_missing_price_falls_back_to_unit_price_times_qty() -> None:
    result = parse_markdown_table(_rows("| Bananas | 2024-01-05 | $0.59 each | 2 | |"))

    assert len(result.records) == 1
    assert result.records[0].price == Decimal("1.18")
    assert result.diagnostics == ()


def test_explicit_positive_price_wins_over_computed_price() -> None:
    result = parse_markdown_table(_rows("| Eggs | 2024-01-05 | $3.00 each | 2 | **$5.00** |"))

    assert result.records[0].price == Decimal("5.00")


def test_unit_mismatch_prices_at_zero_but_keeps_parsed_qty() -> None:
    result = parse_markdown_table(_rows("| Salmon | 2024-01-05 | $10.99 / lb | 2 | |"))

    record = result.records[0]
    assert record.price == Decimal("0")
    # Pricing uses a zero quantity; the stored quantity is still what was pasted.
    assert record.qty == Decimal("2.000")
    assert record.unit_price == Decimal("10.99")
    assert record.pricing_unit is PricingUnit.BY_WEIGHT

    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.row == 1
    assert "doesn't match" in diagnostic.message
    assert diagnostic.message == "Invalid qty/weight; Qty unit (each) doesn't match unit price (lb)"


def test_each_price_with_weight_qty_is_a_mismatch() -> None:
    result = parse_markdown_table(_rows("| Apples | 2024-01-05 | $1.00 each | 3 lb | |"))

    assert result.records[0].price == Decimal("0")
    assert result.records[0].qty == Decimal("3")
    assert result.errors == ["Row 1: Invalid qty/weight; Qty unit (lb) doesn't match unit price (each)"]


def test_unit_mismatch_with_explicit_price_keeps_explicit_price() -> None:
    result = parse_markdown_table(_rows("| Salmon | 2024-01-05 | $10.99 / lb | 2 | $21.98 |"))

    assert result.records[0].price == Decimal("21.98")
    assert "doesn't match" in result.errors[0]


def test_missing_quantity_column_reports_global_diagnostic() -> None:
    text = """
| Item | Date | Unit Price | Price |
|---|---|---|---|
| Milk | 2024-01-05 | $3.49 each | |
| Bread | 2024-01-05 | $2.99 each | |
"""
    result = parse_markdown_table(text)

    assert result.diagnostics[0] == Diagnostic("Missing required columns: Weight/Qty or Qty")
    assert "Weight/Qty or Qty" in result.errors[0]
    assert len(result.records) == 2
    assert all(record.qty == 0 for record in result.records)
    assert all(record.price == 0 for record in result.records)
    assert result.errors[1:] == ["Row 1: Invalid qty/weight", "Row 2: Invalid qty/weight"]


def test_missing_required_columns_are_listed_together() -> None:
    result = parse_markdown_table("| Name | Cost |\n|---|---|\n| Milk | 3 |")

    assert result.errors[0] == "Missing required columns: Item, Date, Unit Price, Weight/Qty or Qty"
    # No item column means every row has a blank item and is dropped.
    assert result.records == ()


def test_rounding_of_price_and_qty() -> None:
    result = parse_markdown_table(_rows("| Widget | 2024-01-05 | 3.3333 | 3 | |"))

    record = result.records[0]
    assert record.price == Decimal("10.00")
    assert str(record.price) == "10.00"
    assert record.unit_price == Decimal("3.33")
    assert str(record.qty) == "3.000"


def test_weight_qty_rounds_to_three_places() -> None:
    result = parse_markdown_table(_rows("| Grapes | 2024-01-05 | $2.00 / lb | 1.23456 lb | |"))

    assert str(result.records[0].qty) == "1.235"
    assert result.records[0].price == Decimal("2.47")


def test_row_problems_are_joined_in_order() -> None:
    result = parse_markdown_table(_rows("| Mystery | | free | none | |"))

    assert result.errors == ["Row 1: Missing date; Invalid unit price; Invalid qty/weight"]
    assert result.records[0].item == "Mystery"
    assert result.records[0].price == Decimal("0")


def test_blank_item_rows_are_dropped_silently() -> None:
    result = parse_markdown_table(_rows("| | 2024-01-05 | $1.00 each | 1 | |", "| **** | 2024-01-05 | $1 | 1 | |"))

    assert result.records == ()
    assert result.diagnostics == ()


def test_row_numbers_count_body_lines_without_delimiters() -> None:
    result = parse_markdown_table(
        _rows(
            "| Milk | 2024-01-05 | $3.49 each | 1 | |",
            "a note that is not a row",
            "| Bread | | $2.99 each | 1 | |",
        )
    )

    assert [record.item for record in result.records] == ["Milk", "Bread"]
    assert result.errors == ["Row 3: Missing date"]


def test_global_diagnostic_comes_before_row_diagnostics() -> None:
    text = "| Item | Unit Price | Qty |\n| Milk | $3.49 each | 1 |"
    result = parse_markdown_table(text)

    assert result.errors == ["Missing required columns: Date", "Row 1: Missing date"]


def test_defaults_for_missing_category_and_store() -> None:
    text = """
| Item | Category | Store | Date | Unit Price | Qty | Price |
| Soap | | | 2024-02-01 | $1.00 each | 4 | |
"""
    record = parse_markdown_table(text).records[0]

    assert record.category == "Other"
    assert record.store == ""
    assert record.price == Decimal("4.00")


def test_short_rows_read_missing_cells_as_empty() -> None:
    result = parse_markdown_table(_rows("| Soap | 2024-02-01 |"))

    assert result.records[0].item == "Soap"
    assert result.errors == ["Row 1: Invalid unit price; Invalid qty/weight"]


def test_alignment_row_with_colons_is_not_taken_as_header() -> None:
    text = """
|:---|:---:|---:|
| Item | Date | Unit Price | Qty | Price |
|:-----|:----:|-----------:|----:|------:|
| Tea | 2024-03-01 | $4.00 each | 2 | |
"""
    result = parse_markdown_table(text)

    assert result.diagnostics == ()
    assert result.records[0].item == "Tea"
    assert result.records[0].price == Decimal("8.00")


def test_table_without_alignment_row() -> None:
    text = "Item | Date | Unit Price | Qty | Total\nTea | 2024-03-01 | 4 | 2 |"
    result = parse_markdown_table(text)

    assert result.records[0].item == "Tea"
    assert result.records[0].price == Decimal("8.00")


@pytest.mark.parametrize("text", ["", "   \n\n  ", "| Item | Date |"])
def test_too_few_lines_is_no_table(text: str) -> None:
    result = parse_markdown_table(text)

    assert result == ParseResult(records=(), diagnostics=(Diagnostic("No markdown table found."),))


def test_text_without_delimiters_has_no_header() -> None:
    result = parse_markdown_table("just some notes\nabout groceries")

    assert result.records == ()
    assert result.errors == ["Header row not found."]


def test_unit_price_header_also_serves_as_price_without_price_column() -> None:
    # With no plain Price/Total column, PRICE resolves to the Unit Price column,
    # so the unit price is taken as the explicit line price.
    text = "| Item | Date | Unit Price | Qty |\n|---|---|---|---|\n| Milk | 2024-01-05 | $3.49 each | 2 |"
    record = parse_markdown_table(text).records[0]

    assert record.unit_price == Decimal("3.49")
    assert record.price == Decimal("3.49")


def test_total_header_is_used_as_price_column() -> None:
    text = """
| Item | Date | Price per lb | Weight | Total |
|---|---|---|---|---|
| Cheese | 2024-01-05 | $8.00 /lb | 0.5 lb | $4.10 |
| Ham | 2024-01-05 | $6.00 /lb | 0.5 lb | |
"""
    result = parse_markdown_table(text)

    assert [record.price for record in result.records] == [Decimal("4.10"), Decimal("3.00")]
    assert result.diagnostics == ()


def test_diagnostics_are_single_line() -> None:
    text = _rows("| Tab\titem | | bad | bad | |", "| Other | 2024-01-05 | $1 / lb | 1 | |")
    for error in parse_markdown_table(text).errors:
        assert "\n" not in error
        assert all(ch.isprintable() for ch in error)


def test_result_total_sums_record_prices() -> None:
    result = parse_markdown_table(FULL_TABLE)

    assert result.total == Decimal("12.00")


def test_quantity_comes_from_higher_priority_header() -> None:
    text = """
| Item | Date | Unit Price | Qty (lb) | Weight |
|---|---|---|---|---|
| Apples | 2024-01-05 | $2.00 / lb | 1.5 lb | 0.7 |
"""
    record = parse_markdown_table(text).records[0]

    assert record.qty == Decimal("1.500")
    assert record.pricing_unit is PricingUnit.BY_WEIGHT
