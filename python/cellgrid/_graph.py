"""Reverse-dependency graph between cells, with transitive lookup and ordering."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Mapping

from cellgrid._location import CellLocation
from cellgrid.expr import CircularReferenceError, Expression


def cell_dependencies(expression: Expression) -> set[CellLocation]:
    """Cells an expression reads.

    Only identifiers in cell-location form count; built-in names never
    become graph edges.
    """
    cells: set[CellLocation] = set()
    for identifier in expression.dependencies():
        location = CellLocation.parse(identifier)
        if location is not None:
            cells.add(location)
    return cells


class UsageGraph:
    """Tracks, for every cell, the cells whose formulas directly read it."""

    __slots__ = ("dependents",)

    def __init__(self) -> None:
        # cell -> set of cells that read from it
        self.dependents: dict[CellLocation, set[CellLocation]] = {}

    def add_cell(self, location: CellLocation) -> None:
        """Make sure *location* has an entry, keeping any existing edges."""
        self.dependents.setdefault(location, set())

    def reset(self, locations: Iterable[CellLocation]) -> None:
        """Drop every edge and start again with empty entries for *locations*."""
        self.dependents = {location: set() for location in locations}

    def direct(self, location: CellLocation) -> set[CellLocation]:
        return self.dependents.get(location, set())

    def link(self, cell: CellLocation, formula: Expression) -> None:
        """Record that *cell* reads every cell *formula* depends on."""
        for ref in cell_dependencies(formula):
            self.dependents.setdefault(ref, set()).add(cell)

    def unlink(self, cell: CellLocation, formula: Expression) -> None:
        """Remove the edges *formula* contributed for *cell*."""
        for ref in cell_dependencies(formula):
            self.dependents.get(ref, set()).discard(cell)

    def used_by(self, location: CellLocation) -> set[CellLocation]:
        """Every cell that depends on *location*, directly or transitively.

        BFS with a visited set, so it terminates even if the graph has a cycle.
        """
        visited: set[CellLocation] = set()
        queue: deque[CellLocation] = deque([location])

        while queue:
            cell = queue.popleft()
            for dep in self.dependents.get(cell, set()):
                if dep not in visited:
                    visited.add(dep)
                    queue.append(dep)

        return visited


def topological_order(formulas: Mapping[CellLocation, Expression]) -> list[CellLocation]:
    """Order cells so each comes after every cell in *formulas* it reads.

    Kahn's algorithm restricted to the given cells; ties are broken in
    row-major order so the result is deterministic.

    Raises CircularReferenceError if the formulas reference each other in a loop.
    """
    cells = set(formulas)
    if not cells:
        return []

    dependents: dict[CellLocation, set[CellLocation]] = {cell: set() for cell in cells}
    in_degree: dict[CellLocation, int] = {}
    for cell in cells:
        reads = cell_dependencies(formulas[cell]) & cells
        in_degree[cell] = len(reads)
        for ref in reads:
            dependents[ref].add(cell)

    ready = sorted(cell for cell in cells if in_degree[cell] == 0)
    queue: deque[CellLocation] = deque(ready)

    order: list[CellLocation] = []
    while queue:
        cell = queue.popleft()
        order.append(cell)
        for dep in sorted(dependents[cell]):
            in_degree[dep] -= 1
            if in_degree[dep] == 0:
                queue.append(dep)

    if len(order) != len(cells):
        missing = sorted(cells - set(order))
        raise CircularReferenceError(
            "Circular reference detected involving: "
            + ", ".join(str(cell) for cell in missing)
        )

    return order
