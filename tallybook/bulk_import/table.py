"""Locate a Markdown table in pasted text and split its rows into cells."""

from dataclasses import dataclass

from .common import ALIGNMENT_ROW_PATTERN, CELL_DELIMITER

NO_TABLE_MESSAGE = "No markdown table found."
NO_HEADER_MESSAGE = "Header row not found."


class TableNotFound(ValueError):
    """Raised when pasted text has no usable table; the message is user-facing."""


@dataclass(frozen=True)
class LocatedTable:
    """Header cells plus the raw body lines that follow them."""

    header: list[str]
    body: list[str]


def normalize_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_alignment_row(line: str) -> bool:
    """Return True for separator rows like ``|---|:---:|``."""
    compact = "".join(line.split())
    return bool(compact) and ALIGNMENT_ROW_PATTERN.match(compact) is not None


def split_row(line: str) -> list[str]:
    """
    Split a table line into trimmed cells.

    One leading and one trailing delimiter are dropped first. Escaped
    pipes (``\\|``) are not recognised and split like any other pipe.
    """
    trimmed = line.strip()
    if trimmed.startswith(CELL_DELIMITER):
        trimmed = trimmed[1:]
    if trimmed.endswith(CELL_DELIMITER):
        trimmed = trimmed[:-1]
    return [cell.strip() for cell in trimmed.split(CELL_DELIMITER)]


def locate_table(text: str) -> LocatedTable:
    """
    Find the header row and body lines of the first table in text.

    The header is the first line containing a delimiter that is not an
    alignment row. An alignment row right after it is skipped. Body lines
    without a delimiter are kept so row numbering matches what the user
    pasted; callers skip them.

    Raises:
        TableNotFound: fewer than two non-blank lines, or no header line.
    """
    lines = normalize_lines(text)
    if len(lines) < 2:
        raise TableNotFound(NO_TABLE_MESSAGE)

    header_idx = next(
        (i for i, line in enumerate(lines) if CELL_DELIMITER in line and not is_alignment_row(line)),
        None,
    )
    if header_idx is None:
        raise TableNotFound(NO_HEADER_MESSAGE)

    body = lines[header_idx + 1 :]
    if body and is_alignment_row(body[0]):
        body = body[1:]

    return LocatedTable(header=split_row(lines[header_idx]), body=body)
