"""Immutable expression nodes: constants, references, empty cells and operators.

Every node supports four operations:

* ``dependencies()`` - transitive set of identifiers the node reads.
* ``numeric_value()`` - the integer a node stands for, or
  :class:`FormulaTypeError` when it is not number-bearing.
* ``evaluate(state)`` - reduce the node against a symbol table mapping
  identifiers (built-in names and cell strings such as ``"A2"``) to
  expressions.  Evaluation never mutates the node.
* ``render()`` - canonical text shown in a cell.

Nodes are shared freely between cells; :data:`EMPTY` is the usual default.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from cellgrid.expr._errors import FormulaTypeError, InvalidExpression


class Expression:
    """Base class for all cell contents."""

    __slots__ = ()

    def dependencies(self) -> set[str]:
        raise NotImplementedError

    def numeric_value(self) -> int:
        raise NotImplementedError

    def evaluate(self, state: Mapping[str, Expression]) -> Expression:
        raise NotImplementedError

    def render(self) -> str:
        raise NotImplementedError

    def is_reference(self) -> bool:
        return False


# ---------------------------------------------------------------------------
# Leaf nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, repr=False)
class Constant(Expression):
    """An integer literal."""

    number: int

    def dependencies(self) -> set[str]:
        return set()

    def numeric_value(self) -> int:
        return self.number

    def evaluate(self, state: Mapping[str, Expression]) -> Expression:
        return self

    def render(self) -> str:
        return str(self.number)

    def __repr__(self) -> str:
        return f"CONSTANT({self.number})"


@dataclass(frozen=True, repr=False)
class Reference(Expression):
    """A named reference to a built-in or a cell such as ``"B3"``.

    A reference whose identifier is missing from the symbol table evaluates
    to itself, so dangling references are ordinary terminal values.
    """

    identifier: str

    def dependencies(self) -> set[str]:
        return {self.identifier}

    def numeric_value(self) -> int:
        raise FormulaTypeError(
            f"reference {self.identifier!r} does not have a numeric value"
        )

    def evaluate(self, state: Mapping[str, Expression]) -> Expression:
        target = state.get(self.identifier)
        if target is None:
            return self
        return target.evaluate(state)

    def render(self) -> str:
        return self.identifier

    def is_reference(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"REFERENCE({self.identifier})"


@dataclass(frozen=True, repr=False)
class Nothing(Expression):
    """The content of a cell nobody has written to."""

    def dependencies(self) -> set[str]:
        return set()

    def numeric_value(self) -> int:
        raise FormulaTypeError("empty cell does not have a numeric value")

    def evaluate(self, state: Mapping[str, Expression]) -> Expression:
        return self

    def render(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "NOTHING"


EMPTY = Nothing()


# ---------------------------------------------------------------------------
# Operator semantics: each takes the ordered operand values (at least one)
# ---------------------------------------------------------------------------

# Cell values are signed 64-bit integers.
MIN_INTEGER = -(2 ** 63)
MAX_INTEGER = 2 ** 63 - 1


def _plus(values: Sequence[int]) -> int:
    return sum(values)


def _minus(values: Sequence[int]) -> int:
    result = values[0]
    for v in values[1:]:
        result -= v
    return result


def _times(values: Sequence[int]) -> int:
    result = 1
    for v in values:
        result *= v
    return result


def _divide(values: Sequence[int]) -> int:
    """Left-to-right integer division, truncating toward zero."""
    result = values[0]
    for v in values[1:]:
        if v == 0:
            raise FormulaTypeError(f"cannot divide {result} by zero")
        quotient = abs(result) // abs(v)
        result = quotient if (result < 0) == (v < 0) else -quotient
    return result


def _less(values: Sequence[int]) -> int:
    for left, right in zip(values, values[1:]):
        if left >= right:
            return 0
    return 1


def _equal(values: Sequence[int]) -> int:
    first = values[0]
    return 1 if all(v == first for v in values) else 0


OPERATORS: dict[str, Callable[[Sequence[int]], int]] = {
    "+": _plus,
    "-": _minus,
    "*": _times,
    "/": _divide,
    "<": _less,
    "=": _equal,
}


# ---------------------------------------------------------------------------
# Operator node
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Operator(Expression):
    """An n-ary arithmetic or comparison over an ordered tuple of operands."""

    symbol: str
    operands: tuple[Expression, ...]

    def __post_init__(self) -> None:
        if not self.operands:
            raise InvalidExpression("No arguments provided")
        if self.symbol not in OPERATORS:
            raise InvalidExpression(f"Unknown operator: {self.symbol}")
        for operand in self.operands:
            if not isinstance(operand, Expression):
                raise InvalidExpression(
                    f"Argument to operator [{self.symbol}] not an expression"
                )

    def dependencies(self) -> set[str]:
        deps: set[str] = set()
        for operand in self.operands:
            deps |= operand.dependencies()
        return deps

    def numeric_value(self) -> int:
        raise FormulaTypeError(
            f"operator [{self.symbol}] must be evaluated before it has a numeric value"
        )

    def evaluate(self, state: Mapping[str, Expression]) -> Expression:
        values = [operand.evaluate(state).numeric_value() for operand in self.operands]
        result = self.apply(values)
        if not MIN_INTEGER <= result <= MAX_INTEGER:
            raise FormulaTypeError(
                f"result of operator [{self.symbol}] is outside the 64-bit integer range"
            )
        return Constant(result)

    def apply(self, values: Sequence[int]) -> int:
        """Run this operator's numeric function over already-reduced values."""
        return OPERATORS[self.symbol](values)

    def render(self) -> str:
        return f" {self.symbol} ".join(operand.render() for operand in self.operands)


def plus(operands: Sequence[Expression]) -> Operator:
    return Operator("+", tuple(operands))


def minus(operands: Sequence[Expression]) -> Operator:
    return Operator("-", tuple(operands))


def times(operands: Sequence[Expression]) -> Operator:
    return Operator("*", tuple(operands))


def divide(operands: Sequence[Expression]) -> Operator:
    return Operator("/", tuple(operands))


def less(operands: Sequence[Expression]) -> Operator:
    return Operator("<", tuple(operands))


def equal(operands: Sequence[Expression]) -> Operator:
    return Operator("=", tuple(operands))
