"""Breadth-first search: shortest path by edge count."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from ..grid import Cell, CellKind
from .base import AbstractSolver


class BreadthFirstSolver(AbstractSolver):
    def search(self) -> Optional[Cell]:
        start, end = self.grid.start, self.grid.end
        start.distance = 1
        queue: Deque[Cell] = deque([start])
        while queue:
            self.checkpoint()
            cell = queue.popleft()
            if cell is end:
                return cell
            self.visit(cell)
            for neighbour in self.grid.open_neighbours(cell):
                if neighbour.distance:
                    continue
                neighbour.distance = cell.distance + 1
                neighbour.parent = cell.index
                self.tag(neighbour, CellKind.HEAD)
                queue.append(neighbour)
        return None


__all__ = ["BreadthFirstSolver"]
