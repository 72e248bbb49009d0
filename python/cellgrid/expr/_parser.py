"""Formula text parsing: the Parser protocol and a precedence-splitting parser."""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from cellgrid.expr._errors import InvalidExpression, ParseError
from cellgrid.expr._factory import CoreFactory, ExpressionFactory
from cellgrid.expr._nodes import MAX_INTEGER, MIN_INTEGER, Expression

# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# Lowest binding first: the text is split on the first of these it contains.
_SPLIT_ORDER = ("=", "<", "+", "-", "*", "/")


def _split(text: str, symbol: str) -> list[str]:
    """Split on *symbol*, dropping trailing empty pieces ("1+" -> ["1"])."""
    pieces = text.split(symbol)
    while pieces and pieces[-1] == "":
        pieces.pop()
    return pieces


@runtime_checkable
class Parser(Protocol):
    """Turns user-entered text into an Expression."""

    def parse(self, text: str) -> Expression:
        """Raise ParseError when *text* is not recognisable."""
        ...


class SimpleParser:
    """Parses integers, identifiers and flat n-ary operator chains.

    ``"A1 + 2 * B0"`` becomes ``plus([A1, times([2, B0])])``.  There are no
    parentheses: operators are split in the order ``= < + - * /`` so the
    first symbol present binds loosest.  Whitespace-only text is Empty.
    """

    def __init__(self, factory: ExpressionFactory | None = None) -> None:
        self._factory = factory if factory is not None else CoreFactory()

    def parse(self, text: str) -> Expression:
        try:
            return self._parse(text)
        except InvalidExpression as e:
            raise ParseError(str(e)) from e

    def _parse(self, text: str) -> Expression:
        text = text.strip()
        if _INTEGER_RE.fullmatch(text):
            try:
                number = int(text)
            except ValueError as e:
                raise ParseError(f"Integer literal too long: {text[:20]}...") from e
            if not MIN_INTEGER <= number <= MAX_INTEGER:
                raise ParseError(f"Integer out of 64-bit range: {text}")
            return self._factory.create_constant(number)

        for symbol in _SPLIT_ORDER:
            if symbol in text:
                args = [self._parse(piece) for piece in _split(text, symbol)]
                return self._factory.create_operator(symbol, args)

        for ch in text:
            if not (ch.isalpha() or ch.isdigit()):
                raise ParseError(f"Unknown input: {text}")
        if not text:
            return self._factory.create_empty()
        return self._factory.create_reference(text)
