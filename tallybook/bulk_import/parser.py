"""Parse pasted Markdown tables into expense records."""

from tallybook.domain.expense import Diagnostic, ExpenseRecord, ParseResult
from tallybook.runtime.logging import get_logger

from .columns import map_columns
from .common import CELL_DELIMITER
from .rows import build_row
from .table import TableNotFound, locate_table, split_row

logger = get_logger(__name__)


def parse_markdown_table(text: str) -> ParseResult:
    """
    Parse a GitHub-style Markdown table of purchases.

    Expected headers (case-insensitive, matched by substring):
        Item | Category | Store | Date | Unit Price | Weight/Qty (or Qty) | Price

    Never raises for malformed input. Problems come back as diagnostics:
    a missing table yields no records and a single diagnostic; missing
    required columns add one diagnostic up front and parsing carries on
    with whatever columns were found; per-row problems are reported
    against the 1-based body row number while the row is still returned.
    Summary rows (SUBTOTAL, TAX, ...) and rows without an item are skipped
    silently.
    """
    try:
        table = locate_table(text or "")
    except TableNotFound as exc:
        logger.debug("No table in pasted text: %s", exc)
        return ParseResult(records=(), diagnostics=(Diagnostic(str(exc)),))

    columns = map_columns(table.header)

    diagnostics: list[Diagnostic] = []
    if columns.missing_message:
        diagnostics.append(Diagnostic(columns.missing_message))

    records: list[ExpenseRecord] = []
    for row_number, line in enumerate(table.body, start=1):
        if CELL_DELIMITER not in line:
            continue
        built = build_row(split_row(line), columns)
        if built is None:
            continue
        if built.problems:
            diagnostics.append(Diagnostic("; ".join(built.problems), row=row_number))
        records.append(built.record)

    logger.debug(
        "Parsed markdown table: %d body lines, %d records, %d diagnostics",
        len(table.body),
        len(records),
        len(diagnostics),
    )
    return ParseResult(records=tuple(records), diagnostics=tuple(diagnostics))


# Short alias for callers that only ever parse tables.
parse = parse_markdown_table
