"""Markdown table import: pasted text in, expense records and diagnostics out."""

from .cells import parse_currency, parse_qty, parse_unit_price
from .columns import ColumnMap, ColumnRole, map_columns
from .parser import parse, parse_markdown_table
from .rows import BuiltRow, build_row, is_summary_row
from .table import LocatedTable, TableNotFound, is_alignment_row, locate_table, normalize_lines, split_row

__all__ = [
    "BuiltRow",
    "ColumnMap",
    "ColumnRole",
    "LocatedTable",
    "TableNotFound",
    "build_row",
    "is_alignment_row",
    "is_summary_row",
    "locate_table",
    "map_columns",
    "normalize_lines",
    "parse",
    "parse_currency",
    "parse_markdown_table",
    "parse_qty",
    "parse_unit_price",
    "split_row",
]
