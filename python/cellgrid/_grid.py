"""Grid: cells holding formulas and derived values, kept consistent on update.

Each in-bounds cell stores a *formula* (what the user entered) and a
*value* (the formula evaluated against the built-ins and every other
cell's value).  ``update`` recomputes the edited cell and everything that
transitively reads it, and commits either all of those values or none.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from cellgrid._graph import UsageGraph, cell_dependencies
from cellgrid._location import MAX_COLUMNS, CellLocation
from cellgrid._protocol import UpdateResponse, ViewElement
from cellgrid.expr import (
    CircularReferenceError,
    Expression,
    FormulaTypeError,
    ParseError,
    Parser,
)

logger = logging.getLogger(__name__)

SEPARATOR = "|"


def _check_dimensions(rows: int, columns: int) -> None:
    if rows < 0 or columns < 0:
        raise ValueError(f"Dimensions must be non-negative, got {rows}x{columns}")
    if columns > MAX_COLUMNS:
        raise ValueError(f"At most {MAX_COLUMNS} columns are supported, got {columns}")


class Grid:
    """A fixed-size (growable) spreadsheet with transactional updates.

    Usage::

        grid = GridBuilder(SimpleParser(), EMPTY).build(5, 3)
        grid.update(CellLocation(0, 0), Constant(4))
        grid.update_text(1, 0, "A0 * 2")
        grid.value_at(CellLocation(1, 0))  # CONSTANT(8)

    Not safe for concurrent writers; callers must serialise ``update``.
    """

    __slots__ = (
        "_parser", "_builtins", "_default", "_rows", "_columns",
        "_formulas", "_values", "_usages",
    )

    def __init__(
        self,
        parser: Parser,
        builtins: Mapping[str, Expression],
        default: Expression,
        rows: int,
        columns: int,
    ) -> None:
        _check_dimensions(rows, columns)
        self._parser = parser
        self._builtins: dict[str, Expression] = dict(builtins)
        self._default = default
        self._rows = rows
        self._columns = columns
        self._formulas: dict[CellLocation, Expression] = {}
        self._values: dict[CellLocation, Expression] = {}
        self._usages = UsageGraph()
        self.clear()

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def parser(self) -> Parser:
        return self._parser

    @property
    def builtins(self) -> Mapping[str, Expression]:
        return MappingProxyType(self._builtins)

    def contains(self, location: CellLocation) -> bool:
        return location.row < self._rows and location.column < self._columns

    def locations(self) -> Iterator[CellLocation]:
        """Every in-bounds location in row-major order."""
        for row in range(self._rows):
            for column in range(self._columns):
                yield CellLocation(row, column)

    def clear(self) -> None:
        """Reset every cell to the default expression; built-ins are kept."""
        for location in self.locations():
            self._formulas[location] = self._default
            self._values[location] = self._default
        self._usages.reset(self.locations())

    def resize(self, rows: int, columns: int) -> None:
        """Grow to *rows* x *columns*, filling new cells with the default.

        Existing cells keep their formulas, values and usages.
        """
        _check_dimensions(rows, columns)
        if rows < self._rows or columns < self._columns:
            raise ValueError(
                f"Cannot shrink grid from {self._rows}x{self._columns} to {rows}x{columns}"
            )
        for row in range(rows):
            for column in range(columns):
                location = CellLocation(row, column)
                if location not in self._formulas:
                    self._formulas[location] = self._default
                    self._values[location] = self._default
                    self._usages.add_cell(location)
        logger.debug(
            "Grew grid from %dx%d to %dx%d", self._rows, self._columns, rows, columns,
        )
        self._rows = rows
        self._columns = columns

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def formula_at(self, location: CellLocation) -> Expression:
        return self._formulas[location]

    def value_at(self, location: CellLocation) -> Expression:
        return self._values[location]

    def used_by(self, location: CellLocation) -> set[CellLocation]:
        """Cells that read *location*, directly or through other cells."""
        return self._usages.used_by(location)

    def view_value(self, row: int, column: int) -> ViewElement:
        return ViewElement(self.value_at(CellLocation(row, column)).render())

    def view_formula(self, row: int, column: int) -> ViewElement:
        return ViewElement(self.formula_at(CellLocation(row, column)).render())

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, location: CellLocation, expression: Expression) -> None:
        """Set the formula at *location* and recompute every dependent cell.

        All-or-nothing: if evaluating the new formula, or re-evaluating any
        cell that transitively reads it, raises FormulaTypeError, the grid
        is left exactly as it was and the error propagates.  A formula that
        would read its own cell raises CircularReferenceError, also without
        changes.
        """
        staged = self._stage(location, expression)

        self._usages.unlink(location, self._formulas[location])
        self._usages.link(location, expression)
        self._formulas[location] = expression
        self._values.update(staged)

    def update_text(self, row: int, column: int, text: str) -> UpdateResponse:
        """Parse *text* with the grid's parser and apply it to (row, column)."""
        try:
            expression = self._parser.parse(text)
        except ParseError:
            return UpdateResponse.fail(f"Unable to parse: {text}")

        location = CellLocation(row, column)
        try:
            self.update(location, expression)
        except FormulaTypeError as e:
            logger.debug("Rolled back update of %s to %r: %s", location, text, e)
            return UpdateResponse.fail(f"Type error: {e}")
        except CircularReferenceError as e:
            logger.debug("Rejected update of %s to %r: %s", location, text, e)
            return UpdateResponse.fail(f"Circular reference: {e}")
        return UpdateResponse.success()

    def _symbol_table(self) -> dict[str, Expression]:
        """Built-ins plus every cell's current value, keyed by ``"A2"`` form."""
        state = dict(self._builtins)
        for location, value in self._values.items():
            state[str(location)] = value
        return state

    def _stage(
        self, location: CellLocation, expression: Expression,
    ) -> dict[CellLocation, Expression]:
        """Compute new values for *location* and every cell that depends on it.

        Touches no grid state; the returned mapping is what ``update``
        commits.
        """
        reads = cell_dependencies(expression)
        if location in reads:
            raise CircularReferenceError(f"{location} cannot refer to itself")
        loop = reads & self._usages.used_by(location)
        if loop:
            cells = ", ".join(str(cell) for cell in sorted(loop))
            raise CircularReferenceError(f"{location} would depend on itself through {cells}")

        state = self._symbol_table()
        value = expression.evaluate(state)
        state[str(location)] = value
        staged = {location: value}
        self._propagate(state, staged, location)
        return staged

    def _propagate(
        self,
        state: dict[str, Expression],
        staged: dict[CellLocation, Expression],
        location: CellLocation,
    ) -> None:
        """Depth-first re-evaluation of the cells that read *location*.

        Terminates because ``_stage`` never lets a loop into the graph.
        """
        for usage in sorted(self._usages.direct(location)):
            value = self._formulas[usage].evaluate(state)
            state[str(usage)] = value
            staged[usage] = value
            self._propagate(state, staged, usage)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self) -> str:
        """``rows|columns`` then one ``|``-joined line of rendered formulas per row."""
        lines = [f"{self._rows}{SEPARATOR}{self._columns}"]
        for row in range(self._rows):
            lines.append(SEPARATOR.join(
                self._formulas[CellLocation(row, column)].render()
                for column in range(self._columns)
            ))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<Grid {self._rows}x{self._columns} builtins={sorted(self._builtins)}>"
