"""Expense command handlers used by the unified CLI."""

import argparse
import datetime
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from tallybook.application.expenses import (
    BulkImportRequest,
    ExpenseEntryRequest,
    run_bulk_import,
    run_expense_entry,
)
from tallybook.domain.categories import CATEGORY_GROUPS
from tallybook.domain.expense import ExpenseRecord, PricingUnit
from tallybook.domain.ledger_export import export_expenses
from tallybook.domain.summary import (
    expense_totals,
    search_expenses,
    spending_trend,
    summarize_by_category,
    summarize_by_month,
    summarize_by_store,
)
from tallybook.runtime import get_logger, load_ledger_export_config
from tallybook.runtime.expense_storage import ExpenseStorageError, append_expenses, delete_expenses, load_expenses

logger = get_logger(__name__)

TABLE_HEADERS = ("#", "Item", "Category", "Store", "Date", "Unit Price", "Qty", "Price")


def _data_file(args: argparse.Namespace) -> Path | None:
    data_file = getattr(args, "data_file", None)
    return Path(data_file) if data_file else None


def _format_unit_price(record: ExpenseRecord) -> str:
    suffix = " / lb" if record.pricing_unit is PricingUnit.BY_WEIGHT else " each"
    return f"${record.unit_price:,.2f}{suffix}"


def _format_qty(record: ExpenseRecord) -> str:
    text = f"{record.qty:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def _print_records(rows: Sequence[tuple[int, ExpenseRecord]]) -> None:
    """Print records as an aligned plain-text table."""
    table = [TABLE_HEADERS]
    for index, record in rows:
        table.append(
            (
                str(index),
                record.item,
                record.category,
                record.store,
                record.date,
                _format_unit_price(record),
                _format_qty(record),
                f"${record.price:,.2f}",
            )
        )
    widths = [max(len(row[col]) for row in table) for col in range(len(TABLE_HEADERS))]
    right_aligned = {0, 5, 6, 7}
    for row in table:
        cells = [
            cell.rjust(widths[col]) if col in right_aligned else cell.ljust(widths[col])
            for col, cell in enumerate(row)
        ]
        print("  ".join(cells).rstrip())


def _read_import_text(source: str | None) -> str:
    if source is None or source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def cmd_import(args: argparse.Namespace) -> int:
    """Preview a pasted Markdown table and optionally append it to storage."""
    try:
        text = _read_import_text(args.file)
    except OSError as exc:
        print(f"Error: could not read {args.file}: {exc}")
        return 1

    data_file = _data_file(args)
    result = run_bulk_import(
        BulkImportRequest(text=text, apply=args.apply),
        sink=lambda records: append_expenses(records, data_file),
    )

    if result.errors:
        print("Some rows need attention:")
        for error in result.errors:
            print(f"  • {error}")
        print()

    if result.status == "empty":
        print("Nothing to import.")
        return 1

    _print_records(list(enumerate(result.records, 1)))
    print(f"\nTotal: ${result.parsed.total:,.2f} ({len(result.records)} items)")

    if result.status == "imported":
        print(f"Imported {len(result.records)} expenses ({result.stored_count} stored).")
    else:
        print("Preview only. Re-run with --apply to import.")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    """Add one expense from command-line values."""
    result = run_expense_entry(
        ExpenseEntryRequest(
            item=args.item,
            date=args.date,
            unit_price=args.unit_price,
            qty=args.qty,
            category=args.category or "",
            store=args.store or "",
        ),
        storage_path=_data_file(args),
    )
    if result.status == "invalid" or result.record is None:
        print(f"Error: {result.error}")
        return 1
    record = result.record
    print(f"Added #{result.index}: {record.item} - ${record.price:,.2f} [{record.category}]")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List stored expenses, optionally filtered and sorted."""
    expenses = load_expenses(_data_file(args))
    if not expenses:
        print("No expenses stored yet.")
        return 0
    rows = search_expenses(expenses, query=args.query or "", sort_by=args.sort_by, descending=args.desc)
    if not rows:
        print(f"No expenses match {args.query!r}.")
        return 0
    _print_records(rows)
    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete stored expenses by index."""
    deleted = delete_expenses(args.indexes, _data_file(args))
    if not deleted:
        print("No matching expenses to delete.")
        return 1
    for record in deleted:
        print(f"Deleted: {record.item} ({record.date}) - ${record.price:,.2f}")
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Print totals plus category, store and monthly breakdowns."""
    expenses = load_expenses(_data_file(args))
    if not expenses:
        print("No expenses stored yet.")
        return 0

    totals = expense_totals(expenses)
    print(f"Expenses: {totals.count}  Total: ${totals.total:,.2f}  Average: ${totals.average:,.2f}")

    print("\nBy category:")
    for category in summarize_by_category(expenses):
        print(f"  {category.category:<32} ${category.total:>10,.2f}  ({category.count} items)")

    print("\nBy store:")
    for store in summarize_by_store(expenses):
        print(f"  {store.store:<32} ${store.total:>10,.2f}  ({store.unique_items} unique items)")

    months = summarize_by_month(expenses, today=datetime.date.today(), months=args.months)
    print("\nBy month:")
    for month in months:
        print(f"  {month.month} {month.month_name}  ${month.total:>10,.2f}  {month.change:+.2f}%")
    print(f"\nTrend: {spending_trend(months)}")
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Write stored expenses as beancount transactions."""
    expenses = load_expenses(_data_file(args))
    export = export_expenses(expenses, load_ledger_export_config())
    for skipped in export.skipped:
        logger.warning("Skipping expense %d: %s", skipped.index, skipped.reason)

    content = export.render()
    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        print(f"Wrote {len(export.entries)} transactions to {args.output}")
    else:
        sys.stdout.write(content)
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """Print the standard category list."""
    for group, categories in CATEGORY_GROUPS.items():
        print(f"{group}:")
        for category in categories:
            print(f"  {category}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI server."""
    import uvicorn

    from tallybook.runtime import expense_server as server

    print(f"Starting tallybook server on {args.host}:{args.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0


def run_with_storage_errors(command: Callable[[argparse.Namespace], int], args: argparse.Namespace) -> int:
    """Run a handler, turning storage failures into an error exit code."""
    try:
        return command(args)
    except ExpenseStorageError as exc:
        print(f"Error: {exc}")
        return 1
