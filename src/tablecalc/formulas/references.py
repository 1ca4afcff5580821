"""Cell reference and range parsing (A1 notation)."""

import re
from typing import Iterator, Optional

from .models import CellAddress, FormulaLimits

_CELL_REF_RE = re.compile(r"^([A-Za-z]+)([0-9]+)$")

DEFAULT_LIMITS = FormulaLimits()


def column_to_index(letters: str) -> int:
    """A->0, B->1, ..., Z->25, AA->26."""
    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def index_to_column(idx: int) -> str:
    """0->A, 1->B, ..., 25->Z, 26->AA."""
    if idx < 0:
        raise ValueError(f"Column index must be >= 0: {idx}")
    result = ""
    idx += 1
    while idx > 0:
        idx, rem = divmod(idx - 1, 26)
        result = chr(rem + ord("A")) + result
    return result


def format_cell_ref(address: CellAddress) -> str:
    """(row=0, col=0) -> 'A1'."""
    return f"{index_to_column(address.col)}{address.row + 1}"


def parse_cell_ref(
    token: str, limits: FormulaLimits = DEFAULT_LIMITS
) -> Optional[CellAddress]:
    """'A1' -> CellAddress(row=0, col=0), or None when not a valid reference.

    References beyond the configured row or column bounds are treated the
    same as malformed text.
    """
    if len(token) > limits.max_reference_length:
        return None
    m = _CELL_REF_RE.match(token)
    if not m:
        return None
    letters, digits = m.groups()
    if len(letters) > limits.max_column_letters:
        return None
    row_number = int(digits)
    if row_number < 1 or row_number > limits.max_row:
        return None
    return CellAddress(row=row_number - 1, col=column_to_index(letters))


def parse_range(
    token: str, limits: FormulaLimits = DEFAULT_LIMITS
) -> Optional[tuple[CellAddress, CellAddress]]:
    """'B2:A1' -> (A1, B2) with corners normalized to top-left / bottom-right."""
    parts = token.split(":")
    if len(parts) != 2:
        return None
    start = parse_cell_ref(parts[0].strip(), limits)
    end = parse_cell_ref(parts[1].strip(), limits)
    if start is None or end is None:
        return None
    top_left = CellAddress(min(start.row, end.row), min(start.col, end.col))
    bottom_right = CellAddress(max(start.row, end.row), max(start.col, end.col))
    return top_left, bottom_right


def range_size(top_left: CellAddress, bottom_right: CellAddress) -> int:
    """Number of cells in the inclusive rectangle."""
    return (bottom_right.row - top_left.row + 1) * (bottom_right.col - top_left.col + 1)


def expand_range(top_left: CellAddress, bottom_right: CellAddress) -> Iterator[CellAddress]:
    """Yield every address in the rectangle, row by row."""
    for r in range(top_left.row, bottom_right.row + 1):
        for c in range(top_left.col, bottom_right.col + 1):
            yield CellAddress(r, c)
