"""cellgrid.expr - formula expressions, their factory and the text parser."""

from cellgrid.expr._errors import (
    CircularReferenceError,
    FormulaTypeError,
    GridError,
    InvalidExpression,
    ParseError,
)
from cellgrid.expr._factory import CoreFactory, ExpressionFactory
from cellgrid.expr._nodes import (
    EMPTY,
    MAX_INTEGER,
    MIN_INTEGER,
    OPERATORS,
    Constant,
    Expression,
    Nothing,
    Operator,
    Reference,
    divide,
    equal,
    less,
    minus,
    plus,
    times,
)
from cellgrid.expr._parser import Parser, SimpleParser

__all__ = [
    "EMPTY",
    "MAX_INTEGER",
    "MIN_INTEGER",
    "OPERATORS",
    "CircularReferenceError",
    "Constant",
    "CoreFactory",
    "Expression",
    "ExpressionFactory",
    "FormulaTypeError",
    "GridError",
    "InvalidExpression",
    "Nothing",
    "Operator",
    "ParseError",
    "Parser",
    "Reference",
    "SimpleParser",
    "divide",
    "equal",
    "less",
    "minus",
    "plus",
    "times",
]
