"""Cell coordinates and their ``"A2"`` string form."""

from __future__ import annotations

import re
from dataclasses import dataclass

COLUMN_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MAX_COLUMNS = len(COLUMN_LETTERS)

_LOCATION_RE = re.compile(r"([A-Z])(0|[1-9][0-9]*)")


@dataclass(frozen=True, order=True)
class CellLocation:
    """A zero-based (row, column) position in a grid.

    The string form is the column letter followed by the row number, so
    ``CellLocation(2, 0)`` is ``"A2"``.
    """

    row: int
    column: int

    def __post_init__(self) -> None:
        if self.row < 0:
            raise ValueError(f"Row must be non-negative, got {self.row}")
        if not 0 <= self.column < MAX_COLUMNS:
            raise ValueError(f"Column must be in [0, {MAX_COLUMNS}), got {self.column}")

    @classmethod
    def of(cls, row: int, column: str) -> CellLocation:
        """Build from a column letter: ``CellLocation.of(4, "D")`` is (4, 3)."""
        if len(column) != 1 or column not in COLUMN_LETTERS:
            raise ValueError(f"Column must be a letter A-Z, got {column!r}")
        return cls(row, COLUMN_LETTERS.index(column))

    @classmethod
    def parse(cls, text: str) -> CellLocation | None:
        """Return the location *text* names, or None if it is not one.

        Accepts exactly one uppercase letter followed by a row number without
        leading zeros, so ``parse`` and ``str`` are inverses.
        """
        m = _LOCATION_RE.fullmatch(text)
        if m is None:
            return None
        return cls.of(int(m.group(2)), m.group(1))

    @property
    def column_letter(self) -> str:
        return COLUMN_LETTERS[self.column]

    def __str__(self) -> str:
        return f"{self.column_letter}{self.row}"
