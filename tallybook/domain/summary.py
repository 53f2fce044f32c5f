"""Spending summaries over a collection of expense records.

These are the numbers behind the dashboard: overall totals, breakdowns by
category, store and month, a simple trend label, and item search.
"""

from __future__ import annotations

import calendar
import datetime
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from tallybook.domain.expense import DEFAULT_CATEGORY, ExpenseRecord, round_money

NO_DATE_LABEL = "No Date"
NO_STORE_LABEL = "Other"
ZERO = Decimal("0")

SortKey = Literal["unit_price", "price"]
Trend = Literal["increasing", "decreasing", "stable"]


@dataclass(frozen=True)
class ExpenseTotals:
    count: int
    total: Decimal
    average: Decimal


@dataclass
class GroupSummary:
    """Items sharing a label (a date or a store) within one category."""

    label: str
    total: Decimal = ZERO
    items: list[tuple[str, Decimal]] = field(default_factory=list)


@dataclass
class CategorySummary:
    category: str
    total: Decimal = ZERO
    count: int = 0
    unit_price_sum: Decimal = ZERO
    qty_sum: Decimal = ZERO
    by_date: list[GroupSummary] = field(default_factory=list)
    by_store: list[GroupSummary] = field(default_factory=list)

    @property
    def average_unit_price(self) -> Decimal:
        if not self.count:
            return ZERO
        return round_money(self.unit_price_sum / self.count)


@dataclass
class StoreSummary:
    store: str
    total: Decimal = ZERO
    count: int = 0
    unique_items: int = 0


@dataclass
class MonthSummary:
    month: str  # YYYY-MM
    month_name: str  # Jan, Feb, ...
    total: Decimal = ZERO
    count: int = 0
    categories: dict[str, tuple[Decimal, int]] = field(default_factory=dict)
    change: Decimal = ZERO  # percent versus the previous month


def expense_totals(records: Sequence[ExpenseRecord]) -> ExpenseTotals:
    total = sum((record.price for record in records), ZERO)
    average = round_money(total / len(records)) if records else ZERO
    return ExpenseTotals(count=len(records), total=round_money(total), average=average)


def _add_to_group(groups: dict[str, GroupSummary], label: str, item: str, price: Decimal) -> None:
    group = groups.setdefault(label, GroupSummary(label=label))
    group.items.append((item, price))
    group.total += price


def summarize_by_category(records: Iterable[ExpenseRecord]) -> list[CategorySummary]:
    """
    Group spending by category, highest total first.

    Within a category, date groups are newest first and store groups are
    highest total first. Empty dates and stores get placeholder labels.
    """
    summaries: dict[str, CategorySummary] = {}
    date_groups: dict[str, dict[str, GroupSummary]] = {}
    store_groups: dict[str, dict[str, GroupSummary]] = {}

    for record in records:
        category = record.category or DEFAULT_CATEGORY
        summary = summaries.get(category)
        if summary is None:
            summary = summaries[category] = CategorySummary(category=category)
            date_groups[category] = {}
            store_groups[category] = {}

        summary.total += record.price
        summary.count += 1
        summary.unit_price_sum += record.unit_price
        summary.qty_sum += record.qty

        _add_to_group(date_groups[category], record.date or NO_DATE_LABEL, record.item, record.price)
        _add_to_group(store_groups[category], record.store or NO_STORE_LABEL, record.item, record.price)

    for category, summary in summaries.items():
        summary.by_date = sorted(date_groups[category].values(), key=lambda g: g.label, reverse=True)
        summary.by_store = sorted(store_groups[category].values(), key=lambda g: g.total, reverse=True)

    return sorted(summaries.values(), key=lambda s: s.total, reverse=True)


def summarize_by_store(records: Iterable[ExpenseRecord]) -> list[StoreSummary]:
    """Group spending by store, highest total first."""
    summaries: dict[str, StoreSummary] = {}
    items: dict[str, set[str]] = {}
    for record in records:
        store = record.store or NO_STORE_LABEL
        summary = summaries.setdefault(store, StoreSummary(store=store))
        summary.total += record.price
        summary.count += 1
        items.setdefault(store, set()).add(record.item)

    for store, summary in summaries.items():
        summary.unique_items = len(items[store])
    return sorted(summaries.values(), key=lambda s: s.total, reverse=True)


def _shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def summarize_by_month(
    records: Iterable[ExpenseRecord],
    today: datetime.date | None = None,
    months: int = 12,
) -> list[MonthSummary]:
    """
    Monthly totals for the ``months`` calendar months ending with today's.

    Returned oldest first. Records are bucketed by the first seven
    characters of their date; dates outside the window (or not in
    YYYY-MM-DD form) are ignored. ``change`` is the percent change from
    the previous month, 0 when the previous month had no spending.
    """
    if today is None:
        today = datetime.date.today()

    window: dict[str, MonthSummary] = {}
    for offset in range(months - 1, -1, -1):
        year, month = _shift_month(today.year, today.month, -offset)
        key = f"{year:04d}-{month:02d}"
        window[key] = MonthSummary(month=key, month_name=calendar.month_abbr[month])

    for record in records:
        summary = window.get(record.date[:7])
        if summary is None:
            continue
        summary.total += record.price
        summary.count += 1
        category = record.category or DEFAULT_CATEGORY
        cat_total, cat_count = summary.categories.get(category, (ZERO, 0))
        summary.categories[category] = (cat_total + record.price, cat_count + 1)

    ordered = list(window.values())
    for previous, current in zip(ordered, ordered[1:]):
        if previous.total:
            current.change = round_money((current.total - previous.total) / previous.total * 100)
    return ordered


def spending_trend(months: Sequence[MonthSummary]) -> Trend:
    """Label the last three months: two rises is increasing, two drops decreasing."""
    recent = months[-3:]
    increases = sum(1 for m in recent if m.change > 0)
    decreases = sum(1 for m in recent if m.change < 0)
    if decreases >= 2:
        return "decreasing"
    if increases >= 2:
        return "increasing"
    return "stable"


def search_expenses(
    records: Sequence[ExpenseRecord],
    query: str = "",
    sort_by: SortKey = "unit_price",
    descending: bool = False,
) -> list[tuple[int, ExpenseRecord]]:
    """
    Filter by case-insensitive item substring and sort numerically.

    Returns (stored index, record) pairs so callers can edit or delete
    the matching entries.
    """
    if sort_by not in ("unit_price", "price"):
        raise ValueError(f"Unsupported sort key: {sort_by}")

    needle = query.strip().lower()
    matches = [(i, record) for i, record in enumerate(records) if needle in record.item.lower()]
    return sorted(matches, key=lambda pair: getattr(pair[1], sort_by), reverse=descending)
