"""Read/write capabilities grids expose to front-ends, and their result types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ViewElement:
    """Rendered cell content plus display hints."""

    content: str
    background: str = "white"
    foreground: str = "black"


@dataclass(frozen=True)
class UpdateResponse:
    """Outcome of a text update: success, or failure with a message."""

    is_success: bool
    message: str | None = None

    @classmethod
    def success(cls) -> UpdateResponse:
        return cls(True)

    @classmethod
    def fail(cls, message: str) -> UpdateResponse:
        return cls(False, message)


@runtime_checkable
class GridView(Protocol):
    """Read-only access for renderers, games and persistence."""

    @property
    def rows(self) -> int:
        ...

    @property
    def columns(self) -> int:
        ...

    def view_value(self, row: int, column: int) -> ViewElement:
        ...

    def view_formula(self, row: int, column: int) -> ViewElement:
        ...


@runtime_checkable
class GridUpdate(Protocol):
    """Write access by raw user text."""

    def update_text(self, row: int, column: int, text: str) -> UpdateResponse:
        """Parse and apply *text*; never raises for bad input.

        Failure messages are ``"Unable to parse: <text>"``,
        ``"Type error: <detail>"`` or ``"Circular reference: <detail>"``.
        """
        ...
