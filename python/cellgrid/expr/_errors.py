"""Error taxonomy shared by expressions, parsers and grids."""

from __future__ import annotations


class GridError(Exception):
    """Base class for every error raised by cellgrid."""


class FormulaTypeError(GridError, TypeError):
    """An expression could not be reduced to a number where one was required."""


class CircularReferenceError(GridError, ValueError):
    """A formula would make a cell depend on itself, directly or transitively."""


class InvalidExpression(GridError, ValueError):
    """An operator expression was constructed with a bad symbol or operands."""


class ParseError(GridError, ValueError):
    """Formula text could not be turned into an expression."""
