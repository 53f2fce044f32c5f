"""Bulk import workflow: parse pasted Markdown, preview, then hand off."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from tallybook.bulk_import import parse_markdown_table
from tallybook.domain.expense import ExpenseRecord, ParseResult
from tallybook.runtime.expense_storage import append_expenses
from tallybook.runtime.logging import get_logger

logger = get_logger(__name__)

ImportStatus = Literal["empty", "preview", "imported"]

# Receives the full ordered sequence of new records; returns the stored count.
RecordSink = Callable[[Sequence[ExpenseRecord]], int]


@dataclass(frozen=True)
class BulkImportRequest:
    """Inputs for running the bulk import workflow."""

    text: str
    apply: bool = False


@dataclass(frozen=True)
class BulkImportResult:
    """Outcome from the bulk import workflow."""

    status: ImportStatus
    parsed: ParseResult
    stored_count: int | None = None

    @property
    def records(self) -> tuple[ExpenseRecord, ...]:
        return self.parsed.records

    @property
    def errors(self) -> list[str]:
        return self.parsed.errors


def run_bulk_import(request: BulkImportRequest, sink: RecordSink | None = None) -> BulkImportResult:
    """
    Parse the pasted table and, when asked, pass every record to the sink.

    Diagnostics never block the import; rows with problems are imported
    with their best-effort values. The default sink appends to storage.
    """
    parsed = parse_markdown_table(request.text)

    if not parsed.records:
        return BulkImportResult(status="empty", parsed=parsed)

    if not request.apply:
        return BulkImportResult(status="preview", parsed=parsed)

    if sink is None:
        sink = append_expenses

    if parsed.diagnostics:
        logger.warning("Importing %d records with %d diagnostics", len(parsed.records), len(parsed.diagnostics))
    stored_count = sink(list(parsed.records))
    return BulkImportResult(status="imported", parsed=parsed, stored_count=stored_count)
