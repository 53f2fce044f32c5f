"""Map Markdown table header cells to expense fields."""

from dataclasses import dataclass
from enum import Enum


class ColumnRole(Enum):
    ITEM = "Item"
    CATEGORY = "Category"
    STORE = "Store"
    DATE = "Date"
    UNIT_PRICE = "Unit Price"
    QUANTITY = "Weight/Qty or Qty"
    PRICE = "Price"


# (role, header fragments in priority order, required)
# Fragments are matched as substrings of the lower-cased header cell.
COLUMN_CANDIDATES: tuple[tuple[ColumnRole, tuple[str, ...], bool], ...] = (
    (ColumnRole.ITEM, ("item",), True),
    (ColumnRole.CATEGORY, ("category",), False),
    (ColumnRole.STORE, ("store",), False),
    (ColumnRole.DATE, ("date",), True),
    (ColumnRole.UNIT_PRICE, ("unit price", "unitprice", "price per", "per"), True),
    (ColumnRole.QUANTITY, ("weight/qty", "qty", "weight", "amount"), True),
    (ColumnRole.PRICE, ("price", "total"), False),
)


@dataclass(frozen=True)
class ColumnMap:
    """Resolved column index per role; unresolved roles are absent."""

    indexes: dict[ColumnRole, int]
    missing_required: tuple[ColumnRole, ...] = ()

    def index_of(self, role: ColumnRole) -> int | None:
        return self.indexes.get(role)

    def cell(self, cells: list[str], role: ColumnRole) -> str:
        """Return the cell for role, or "" when unresolved or the row is short."""
        idx = self.indexes.get(role)
        if idx is None or idx >= len(cells):
            return ""
        return cells[idx]

    @property
    def missing_message(self) -> str | None:
        if not self.missing_required:
            return None
        return "Missing required columns: " + ", ".join(role.value for role in self.missing_required)


def _find_column(header: list[str], fragments: tuple[str, ...], prefer_exact: bool = False) -> int | None:
    """
    Return the first header cell containing a fragment.

    Earlier fragments win, then the leftmost cell. With prefer_exact, a
    cell equal to some fragment is taken before any substring match; PRICE
    uses this so a plain "Price" column beats "Unit Price".
    """
    names = [name.strip() for name in header]
    if prefer_exact:
        for fragment in fragments:
            for idx, name in enumerate(names):
                if name == fragment:
                    return idx
    for fragment in fragments:
        for idx, name in enumerate(names):
            if fragment in name:
                return idx
    return None


def map_columns(header_cells: list[str]) -> ColumnMap:
    """
    Resolve each role independently against the header.

    Roles are not de-duplicated, so a "Unit Price" column also satisfies
    PRICE when the table has no plain "Price" or "Total" column.
    """
    header = [cell.replace("*", "").lower() for cell in header_cells]

    indexes: dict[ColumnRole, int] = {}
    missing: list[ColumnRole] = []
    for role, fragments, required in COLUMN_CANDIDATES:
        idx = _find_column(header, fragments, prefer_exact=role is ColumnRole.PRICE)
        if idx is not None:
            indexes[role] = idx
        elif required:
            missing.append(role)

    return ColumnMap(indexes=indexes, missing_required=tuple(missing))
