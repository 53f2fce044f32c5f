"""Storage for the expense collection.

The collection is an ordered JSON list of records in ``data/expenses.json``.
Records have no identity beyond their position; edits and deletes address
them by zero-based index. Imports append without deduplication.
"""

import json
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from tallybook.domain.expense import ExpenseRecord
from tallybook.runtime.logging import get_logger
from tallybook.runtime.paths import get_paths

logger = get_logger(__name__)


class ExpenseStorageError(RuntimeError):
    """Raised when the stored expense collection cannot be read or written."""


def _resolve(path: Path | None) -> Path:
    return path if path is not None else get_paths().expenses


def load_expenses(path: Path | None = None) -> list[ExpenseRecord]:
    """
    Load the stored collection.

    A missing file is an empty collection.

    Raises:
        ExpenseStorageError: the file exists but is not a JSON list of records.
    """
    filepath = _resolve(path)
    if not filepath.exists():
        return []

    try:
        raw = json.loads(filepath.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Error reading expenses from %s: %s", filepath, exc)
        raise ExpenseStorageError(f"Could not read expenses from {filepath}: {exc}") from exc

    if not isinstance(raw, list) or not all(isinstance(entry, dict) for entry in raw):
        logger.error("Unexpected expense file layout in %s", filepath)
        raise ExpenseStorageError(f"Expected a list of expense objects in {filepath}")

    return [ExpenseRecord.from_dict(entry) for entry in raw]


def save_expenses(records: Iterable[ExpenseRecord], path: Path | None = None) -> Path:
    """
    Replace the stored collection with records.

    Writes to a temporary file next to the target and renames it into place.

    Returns:
        Path to the saved file
    """
    filepath = _resolve(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    payload = [record.to_dict() for record in records]

    fd, tmp_name = tempfile.mkstemp(prefix=".expenses-", suffix=".json", dir=filepath.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, filepath)
    except OSError as exc:
        Path(tmp_name).unlink(missing_ok=True)
        logger.error("Error saving expenses to %s: %s", filepath, exc)
        raise ExpenseStorageError(f"Could not save expenses to {filepath}: {exc}") from exc

    logger.debug("Saved %d expenses to %s", len(payload), filepath)
    return filepath


def append_expenses(records: Iterable[ExpenseRecord], path: Path | None = None) -> int:
    """
    Append records, in order, to the stored collection.

    Returns:
        Size of the collection after the append
    """
    new_records = list(records)
    expenses = load_expenses(path)
    expenses.extend(new_records)
    save_expenses(expenses, path)
    logger.info("Imported %d expenses (%d stored)", len(new_records), len(expenses))
    return len(expenses)


def add_expense(record: ExpenseRecord, path: Path | None = None) -> int:
    """Append a single record; returns its index."""
    return append_expenses([record], path) - 1


def update_expense(index: int, record: ExpenseRecord, path: Path | None = None) -> ExpenseRecord:
    """
    Replace the record at index.

    Returns:
        The record that was replaced

    Raises:
        IndexError: index is outside the stored collection
    """
    expenses = load_expenses(path)
    if not 0 <= index < len(expenses):
        raise IndexError(f"No expense at index {index} ({len(expenses)} stored)")
    previous = expenses[index]
    expenses[index] = record
    save_expenses(expenses, path)
    logger.info("Updated expense %d", index)
    return previous


def delete_expenses(indexes: Iterable[int], path: Path | None = None) -> list[ExpenseRecord]:
    """
    Delete the records at the given indexes; unknown indexes are ignored.

    Returns:
        The deleted records, in stored order
    """
    to_delete = set(indexes)
    expenses = load_expenses(path)
    kept = [record for i, record in enumerate(expenses) if i not in to_delete]
    deleted = [record for i, record in enumerate(expenses) if i in to_delete]
    if deleted:
        save_expenses(kept, path)
        logger.info("Deleted %d expenses (%d stored)", len(deleted), len(kept))
    return deleted
