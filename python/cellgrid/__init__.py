"""cellgrid - a small spreadsheet engine with transactional recalculation.

Usage::

    from cellgrid import CellLocation, Constant, create_grid

    grid = create_grid(5, 3, builtins={"ten": Constant(10)})
    grid.update_text(0, 0, "ten + 1")
    grid.update_text(1, 0, "A0 * 2")
    grid.view_value(1, 0).content  # "22"

    # Failed updates leave the grid untouched
    response = grid.update_text(0, 0, "B4 + 1")  # B4 is empty
    response.message  # "Type error: ..."
"""

from __future__ import annotations

from collections.abc import Mapping

from cellgrid._builder import GridBuilder
from cellgrid._display import DisplayGrid
from cellgrid._files import decode, export_xlsx, load_grid, save_grid
from cellgrid._graph import UsageGraph, topological_order
from cellgrid._grid import Grid
from cellgrid._location import CellLocation
from cellgrid._protocol import GridUpdate, GridView, UpdateResponse, ViewElement
from cellgrid.expr import (
    EMPTY,
    CircularReferenceError,
    Constant,
    CoreFactory,
    Expression,
    ExpressionFactory,
    FormulaTypeError,
    GridError,
    InvalidExpression,
    Nothing,
    Operator,
    ParseError,
    Parser,
    Reference,
    SimpleParser,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EMPTY",
    "CellLocation",
    "CircularReferenceError",
    "Constant",
    "CoreFactory",
    "DisplayGrid",
    "Expression",
    "ExpressionFactory",
    "FormulaTypeError",
    "Grid",
    "GridBuilder",
    "GridError",
    "GridUpdate",
    "GridView",
    "InvalidExpression",
    "Nothing",
    "Operator",
    "ParseError",
    "Parser",
    "Reference",
    "SimpleParser",
    "UpdateResponse",
    "UsageGraph",
    "ViewElement",
    "create_grid",
    "decode",
    "export_xlsx",
    "load_grid",
    "save_grid",
    "topological_order",
]


def create_grid(
    rows: int,
    columns: int,
    builtins: Mapping[str, Expression] | None = None,
    parser: Parser | None = None,
) -> Grid:
    """Build an empty grid that parses with :class:`SimpleParser` by default."""
    builder = GridBuilder(parser if parser is not None else SimpleParser(CoreFactory()), EMPTY)
    for identifier, expression in (builtins or {}).items():
        builder.include_builtin(identifier, expression)
    return builder.build(rows, columns)
