"""Saving and loading grids.

The text format is what :meth:`Grid.encode` produces::

    3|2
    1|A0 + 1
    |
    B0 * 2|

Line one is ``rows|columns``; each following line is one row of rendered
formulas joined by ``|``, with empty cells as empty strings.

``export_xlsx`` writes committed values to an Excel worksheet for use in
other spreadsheet programs; it is one-way.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cellgrid._graph import topological_order
from cellgrid._grid import SEPARATOR, Grid
from cellgrid._location import CellLocation
from cellgrid.expr import Constant, Expression, ParseError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Text format
# ---------------------------------------------------------------------------


def decode(text: str) -> tuple[int, int, dict[CellLocation, str]]:
    """Split encoded grid text into ``(rows, columns, {location: formula_text})``.

    Only non-empty cells are returned.  Raises ParseError when the header
    or the row/column counts do not match.
    """
    lines = text.split("\n")

    header = lines[0].split(SEPARATOR)
    if len(header) != 2 or not all(part.isdigit() for part in header):
        raise ParseError(f"Malformed header: {lines[0]!r}")
    rows, columns = int(header[0]), int(header[1])

    body = lines[1:]
    # A trailing newline leaves one extra empty line.
    if len(body) == rows + 1 and body[-1] == "":
        body.pop()
    if len(body) != rows:
        raise ParseError(f"Expected {rows} rows, found {len(body)}")

    cells: dict[CellLocation, str] = {}
    for row, line in enumerate(body):
        # Rows of a zero-column grid are empty lines.
        fields = line.split(SEPARATOR) if line or columns else []
        if len(fields) != columns:
            raise ParseError(
                f"Row {row} has {len(fields)} cells, expected {columns}"
            )
        for column, field in enumerate(fields):
            if field.strip():
                cells[CellLocation(row, column)] = field
    return rows, columns, cells


def save_grid(grid: Grid, filename: str | os.PathLike[str]) -> None:
    """Write the grid's formulas to *filename*."""
    Path(filename).write_text(grid.encode(), encoding="utf-8")
    logger.debug("Saved %dx%d grid to %s", grid.rows, grid.columns, filename)


def load_grid(grid: Grid, filename: str | os.PathLike[str]) -> None:
    """Replace the grid's contents with the formulas stored in *filename*.

    The grid grows to fit the file if needed, is cleared, and every stored
    formula is re-entered through the grid's parser.  Cells are applied in
    dependency order so a formula may read a cell that appears later in
    the file.

    Raises ParseError for a malformed file or formula, FormulaTypeError if
    a formula does not evaluate, and CircularReferenceError if formulas
    read each other in a loop.
    """
    rows, columns, cells = decode(Path(filename).read_text(encoding="utf-8"))
    if rows > grid.rows or columns > grid.columns:
        grid.resize(max(rows, grid.rows), max(columns, grid.columns))
    grid.clear()

    parsed: dict[CellLocation, Expression] = {
        location: grid.parser.parse(text) for location, text in cells.items()
    }
    for location in topological_order(parsed):
        grid.update(location, parsed[location])
    logger.debug("Loaded %d cells from %s", len(parsed), filename)


# ---------------------------------------------------------------------------
# Spreadsheet export
# ---------------------------------------------------------------------------


def export_xlsx(
    grid: Grid, filename: str | os.PathLike[str], title: str = "Sheet",
) -> None:
    """Write committed values to a one-sheet .xlsx workbook.

    Grid cell (row, column) lands in worksheet cell (row + 1, column + 1).
    Constants are written as numbers, other non-empty values as their
    rendered text.
    """
    from openpyxl import Workbook

    wb = Workbook()
    ws = wb.active
    ws.title = title
    for location in grid.locations():
        value = grid.value_at(location)
        if isinstance(value, Constant):
            cell_value: int | str = value.number
        else:
            cell_value = value.render()
            if not cell_value:
                continue
        ws.cell(row=location.row + 1, column=location.column + 1, value=cell_value)
    wb.save(str(filename))
    logger.debug("Exported %dx%d grid to %s", grid.rows, grid.columns, filename)
