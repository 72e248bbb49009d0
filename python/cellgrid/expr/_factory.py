"""ExpressionFactory protocol and the factory for the core node types."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from cellgrid.expr._nodes import EMPTY, Constant, Expression, Operator, Reference


@runtime_checkable
class ExpressionFactory(Protocol):
    """Hides which concrete nodes a parser produces."""

    def create_reference(self, identifier: str) -> Expression:
        ...

    def create_constant(self, value: int) -> Expression:
        ...

    def create_empty(self) -> Expression:
        ...

    def create_operator(self, symbol: str, args: Sequence[Any]) -> Expression:
        """Build an operator node.

        Raises InvalidExpression for an unknown symbol, no arguments, or an
        argument that is not an Expression.
        """
        ...


class CoreFactory:
    """Creates Constant, Reference, Nothing and Operator nodes."""

    def create_reference(self, identifier: str) -> Expression:
        return Reference(identifier)

    def create_constant(self, value: int) -> Expression:
        return Constant(value)

    def create_empty(self) -> Expression:
        return EMPTY

    def create_operator(self, symbol: str, args: Sequence[Any]) -> Expression:
        return Operator(symbol, tuple(args))
