"""Abstract interface shared by the grid search algorithms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import CanceledError
from ..grid import Cell, CellKind, Grid
from ..session import SolveSession


class AbstractSolver(ABC):
    """Base class for algorithms that walk a grid from start to end.

    Solvers work on the grid in place: ``kind``, ``distance``, ``heuristic``
    and ``parent`` of passable cells are scratch state, cleared by
    :meth:`Grid.reset_for_solve` before each run.
    """

    def __init__(self, grid: Grid, session: SolveSession) -> None:
        self.grid = grid
        self.session = session
        self.visited = 0

    @abstractmethod
    def search(self) -> Optional[Cell]:
        """Run the search and return the end cell, or None if unreachable."""

    def mark_path(self, end: Cell) -> int:
        """Tag the parent chain ending at ``end`` and return its length."""

        length = 0
        cell: Optional[Cell] = end
        while cell is not None:
            self.tag(cell, CellKind.SOLUTION)
            length += 1
            cell = self.grid.cell_by_index(cell.parent) if cell.parent is not None else None
        return length

    def checkpoint(self) -> None:
        """Step boundary: honour the animation delay and the cancel flag."""

        event = self.session.cancel_event
        delay = self.session.step_delay
        cancelled = event.wait(delay) if delay > 0 else event.is_set()
        if cancelled:
            raise CanceledError(f"{type(self).__name__} canceled")

    @staticmethod
    def tag(cell: Cell, kind: CellKind) -> None:
        if cell.kind in (CellKind.START, CellKind.END):
            return
        cell.kind = kind

    def visit(self, cell: Cell) -> None:
        self.tag(cell, CellKind.VISITED)
        self.visited += 1


__all__ = ["AbstractSolver"]
