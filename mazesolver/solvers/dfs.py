"""Depth-first search. Finds a path, not necessarily the shortest one."""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..grid import Cell, CellKind
from .base import AbstractSolver


class DepthFirstSolver(AbstractSolver):
    def search(self) -> Optional[Cell]:
        grid = self.grid
        end = grid.end
        # (cell index, parent index); duplicates are dropped when popped.
        stack: List[Tuple[int, Optional[int]]] = [(grid.start.index, None)]
        while stack:
            index, parent = stack.pop()
            cell = grid.cell_by_index(index)
            if cell.distance:
                continue
            self.checkpoint()
            if parent is None:
                cell.distance = 1
            else:
                cell.distance = grid.cell_by_index(parent).distance + 1
            cell.parent = parent
            self.visit(cell)
            if cell is end:
                return cell
            for neighbour in grid.open_neighbours(cell):
                if not neighbour.distance:
                    self.tag(neighbour, CellKind.HEAD)
                stack.append((neighbour.index, cell.index))
        return None


__all__ = ["DepthFirstSolver"]
