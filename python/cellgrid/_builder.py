"""GridBuilder: collects built-ins and stamps out independent grids."""

from __future__ import annotations

from cellgrid._grid import Grid
from cellgrid.expr import Expression, Parser


class GridBuilder:
    """Accumulates named built-in values shared by the grids it builds.

    Each grid gets its own copy of the built-ins table, so adding a
    built-in later never changes a grid that was already built::

        builder = GridBuilder(SimpleParser(), EMPTY).include_builtin("ten", Constant(10))
        grid = builder.build(20, 5)
    """

    __slots__ = ("_parser", "_default", "_builtins")

    def __init__(self, parser: Parser, default: Expression) -> None:
        self._parser = parser
        self._default = default
        self._builtins: dict[str, Expression] = {}

    def include_builtin(self, identifier: str, expression: Expression) -> GridBuilder:
        self._builtins[identifier] = expression
        return self

    def build(self, rows: int, columns: int) -> Grid:
        return Grid(self._parser, dict(self._builtins), self._default, rows, columns)
