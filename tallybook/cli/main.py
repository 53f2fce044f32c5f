#!/usr/bin/env python3

import argparse
from collections.abc import Sequence


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Track expenses pasted as Markdown tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  import [file] [--apply]    Preview a Markdown table (stdin if no file); --apply stores it
  add <item> --date --unit-price [--qty] [--category] [--store]
                             Add a single expense
  list [--query] [--sort-by] [--desc]
                             List stored expenses
  delete <index> [...]       Delete stored expenses by index
  summary [--months]         Totals by category, store and month
  export [--output]          Write expenses as beancount transactions
  categories                 List the standard categories
  serve [--host] [--port]    Start the HTTP server

Markdown tables need these headers (any order, case-insensitive):
  Item | Category | Store | Date | Unit Price | Weight/Qty | Price
""",
    )
    parser.add_argument("--data-file", default=None, help="Expense JSON file (default: $TALLYBOOK_HOME/data/expenses.json)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser("import", help="Import a Markdown table of expenses")
    import_parser.add_argument("file", nargs="?", default=None, help="Markdown file ('-' or omitted reads stdin)")
    import_parser.add_argument("--apply", action="store_true", help="Store parsed records instead of previewing")

    add_parser = subparsers.add_parser("add", help="Add a single expense")
    add_parser.add_argument("item", help="Item description")
    add_parser.add_argument("--date", required=True, help="Purchase date (YYYY-MM-DD)")
    add_parser.add_argument("--unit-price", required=True, help="Price per item")
    add_parser.add_argument("--qty", default="1", help="Whole-number quantity (default: 1)")
    add_parser.add_argument("--category", default=None, help="Category (default: Other)")
    add_parser.add_argument("--store", default=None, help="Store name")

    list_parser = subparsers.add_parser("list", help="List stored expenses")
    list_parser.add_argument("--query", default=None, help="Only items containing this text")
    list_parser.add_argument("--sort-by", choices=["unit_price", "price"], default="unit_price")
    list_parser.add_argument("--desc", action="store_true", help="Sort descending")

    delete_parser = subparsers.add_parser("delete", help="Delete stored expenses")
    delete_parser.add_argument("indexes", nargs="+", type=int, help="Indexes shown by 'list'")

    summary_parser = subparsers.add_parser("summary", help="Summarize spending")
    summary_parser.add_argument("--months", type=int, default=12, help="Months to include (default: 12)")

    export_parser = subparsers.add_parser("export", help="Export expenses as beancount")
    export_parser.add_argument("--output", default=None, help="Output file (default: stdout)")

    subparsers.add_parser("categories", help="List standard categories")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    from tallybook.cli import expenses as commands

    handlers = {
        "import": commands.cmd_import,
        "add": commands.cmd_add,
        "list": commands.cmd_list,
        "delete": commands.cmd_delete,
        "summary": commands.cmd_summary,
        "export": commands.cmd_export,
        "categories": commands.cmd_categories,
        "serve": commands.cmd_serve,
    }
    handler = handlers.get(args.command)
    if handler is None:
        print(f"Unsupported command: {args.command}")
        return 1

    if args.command == "summary" and args.months < 1:
        print("--months must be at least 1")
        return 1

    return commands.run_with_storage_errors(handler, args)


if __name__ == "__main__":
    raise SystemExit(main())
