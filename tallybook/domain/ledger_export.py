"""Render stored expenses as beancount transactions."""

from __future__ import annotations

import datetime
import io
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from beancount.core import amount, data, flags
from beancount.parser import printer

from tallybook.domain.categories import default_account_for_category
from tallybook.domain.expense import ExpenseRecord


@dataclass(frozen=True)
class LedgerExportConfig:
    """Accounts and currency used when writing transactions."""

    currency: str = "USD"
    funding_account: str = "Assets:Cash"
    # Lower-cased category name -> account
    category_accounts: Mapping[str, str] = field(default_factory=dict)

    def account_for(self, category: str) -> str:
        override = self.category_accounts.get(category.strip().lower())
        if override:
            return override
        return default_account_for_category(category)


@dataclass(frozen=True)
class SkippedExpense:
    index: int
    reason: str


@dataclass(frozen=True)
class LedgerExport:
    entries: list[data.Transaction]
    skipped: list[SkippedExpense]

    def render(self) -> str:
        output_buffer = io.StringIO()
        printer.print_entries(self.entries, file=output_buffer)
        return output_buffer.getvalue()


def _parse_iso_date(text: str) -> datetime.date | None:
    try:
        return datetime.date.fromisoformat(text.strip())
    except ValueError:
        return None


def expense_to_transaction(
    record: ExpenseRecord,
    config: LedgerExportConfig,
    index: int = 0,
) -> data.Transaction:
    """
    Build a two-posting transaction for one expense.

    The expense account is debited with the record price and the funding
    account credited. The caller must ensure the date is ISO formatted.
    """
    txn_date = _parse_iso_date(record.date)
    if txn_date is None:
        raise ValueError(f"Expense date is not YYYY-MM-DD: {record.date!r}")

    meta = data.new_metadata("tallybook", index)
    meta["unit_price"] = f"{record.unit_price} {record.pricing_unit.value}"
    meta["qty"] = str(record.qty)

    txn = data.Transaction(
        meta=meta,
        date=txn_date,
        flag=flags.FLAG_OKAY,
        payee=record.store or None,
        narration=record.item,
        tags=frozenset(),
        links=frozenset(),
        postings=[],
    )
    txn.postings.append(
        data.Posting(
            config.account_for(record.category),
            amount.Amount(record.price, config.currency),
            None,
            None,
            None,
            None,
        )
    )
    txn.postings.append(
        data.Posting(
            config.funding_account,
            amount.Amount(-record.price, config.currency),
            None,
            None,
            None,
            None,
        )
    )
    return txn


def export_expenses(records: Sequence[ExpenseRecord], config: LedgerExportConfig | None = None) -> LedgerExport:
    """Convert records to transactions, skipping undated and zero-priced ones."""
    if config is None:
        config = LedgerExportConfig()

    entries: list[data.Transaction] = []
    skipped: list[SkippedExpense] = []
    for index, record in enumerate(records):
        if _parse_iso_date(record.date) is None:
            skipped.append(SkippedExpense(index, f"date is not YYYY-MM-DD: {record.date or '(empty)'}"))
            continue
        if record.price <= 0:
            skipped.append(SkippedExpense(index, "price is not positive"))
            continue
        entries.append(expense_to_transaction(record, config, index=index))

    # Stable sort keeps the stored order within a day.
    entries.sort(key=lambda entry: entry.date)
    return LedgerExport(entries=entries, skipped=skipped)
