"""DisplayGrid: a preview grid that shows parsed formulas without evaluating."""

from __future__ import annotations

from cellgrid._location import CellLocation
from cellgrid._protocol import UpdateResponse, ViewElement
from cellgrid.expr import Expression, ParseError, Parser


class DisplayGrid:
    """Stores whatever the parser returns and renders it as both value and formula."""

    __slots__ = ("_parser", "_rows", "_columns", "_contents")

    def __init__(self, parser: Parser, default: Expression, rows: int, columns: int) -> None:
        self._parser = parser
        self._rows = rows
        self._columns = columns
        self._contents: dict[CellLocation, Expression] = {
            CellLocation(row, column): default
            for row in range(rows)
            for column in range(columns)
        }

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def columns(self) -> int:
        return self._columns

    def update_text(self, row: int, column: int, text: str) -> UpdateResponse:
        try:
            expression = self._parser.parse(text)
        except ParseError:
            return UpdateResponse.fail(f"Unable to parse: {text}")
        self._contents[CellLocation(row, column)] = expression
        return UpdateResponse.success()

    def view_value(self, row: int, column: int) -> ViewElement:
        return ViewElement(self._contents[CellLocation(row, column)].render())

    def view_formula(self, row: int, column: int) -> ViewElement:
        return self.view_value(row, column)
