"""
records.py  ── the uniform tabular record model

Every reader lowers its source into a ``RecordSet`` (ordered rows of string
cells, row 0 first) and every writer raises one back out.  Two rules hold for
any record set a reader returns:

* no cell contains CR or LF, and cells carry no leading/trailing or doubled
  interior spaces (``sanitize``);
* no row is shorter than row 0 (``align_width``); wider rows are kept as is.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence

import pandas as pd
import pyarrow as pa

__all__ = ["RecordSet", "sanitize", "align_width", "normalize_rows"]

Row = List[str]


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def sanitize(cell: str) -> str:
    """Collapse line breaks and repeated spaces in *cell* and trim it."""
    cell = cell.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
    while "  " in cell:
        cell = cell.replace("  ", " ")
    return cell.strip()


def align_width(rows: List[Row], width: Optional[int] = None) -> List[Row]:
    """Right-pad every row shorter than row 0 with empty cells, in place.

    *width* overrides the column count of row 0 (the xls reader takes it from
    the sheet, whose row 0 may be missing). Longer rows are never truncated.
    Returns *rows* for chaining.
    """
    if not rows:
        return rows
    if width is None:
        width = len(rows[0])
    for row in rows[1:]:
        if len(row) < width:
            row.extend([""] * (width - len(row)))
    return rows


def normalize_rows(rows: Iterable[Sequence[str]], width: Optional[int] = None) -> List[Row]:
    """Sanitize every cell, then align widths to row 0."""
    return align_width([[sanitize(cell) for cell in row] for row in rows], width)


# ---------------------------------------------------------------------------
# Record set
# ---------------------------------------------------------------------------

class RecordSet:
    """Ordered rows of string cells; row 0 doubles as the header row."""

    __slots__ = ("rows",)

    def __init__(self, rows: Iterable[Sequence[str]] = ()):
        self.rows: List[Row] = [list(row) for row in rows]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def __getitem__(self, index):
        return self.rows[index]

    def __eq__(self, other) -> bool:
        if isinstance(other, RecordSet):
            return self.rows == other.rows
        return NotImplemented

    def __repr__(self) -> str:
        return f"RecordSet(rows={len(self.rows)}, width={self.width})"

    @property
    def header(self) -> Row:
        return self.rows[0] if self.rows else []

    @property
    def width(self) -> int:
        return len(self.header)

    @property
    def data_row_count(self) -> int:
        """Number of rows after the header, never negative."""
        return max(0, len(self.rows) - 1)

    def to_records(self) -> List[dict]:
        """Project every data row onto the header row.

        Columns the row does not reach become ``""``; cells beyond the header
        are dropped.  With duplicate header names the right-most column wins.
        """
        header = self.header
        return [
            {key: (row[i] if i < len(row) else "") for i, key in enumerate(header)}
            for row in self.rows[1:]
        ]

    # ---------- interop ----------

    def _columns(self) -> tuple:
        width = max((len(row) for row in self.rows), default=0)
        names = list(self.header) + [f"column_{i + 1}" for i in range(self.width, width)]
        body = [row + [""] * (width - len(row)) for row in self.rows[1:]]
        return names, body

    def to_arrow(self) -> pa.Table:
        """Return the data rows as a string-typed PyArrow Table."""
        names, body = self._columns()
        arrays = [pa.array([row[i] for row in body], type=pa.string()) for i in range(len(names))]
        return pa.Table.from_arrays(arrays, names=names)

    def to_pandas(self) -> pd.DataFrame:
        """Return the data rows as a Pandas DataFrame of strings."""
        names, body = self._columns()
        return pd.DataFrame(body, columns=names, dtype=object)
