"""A* search with a Manhattan-distance heuristic."""

from __future__ import annotations

import heapq
import itertools
from typing import Dict, List, Optional, Set, Tuple

from ..grid import Cell, CellKind
from .base import AbstractSolver

# heuristic, insertion order, cell index, distance, parent index
OpenEntry = Tuple[int, int, int, int, Optional[int]]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


class AStarSolver(AbstractSolver):
    """Expand the open cell with the lowest ``distance + manhattan(cell, end)``.

    Steps are unit cost without diagonals, so the heuristic is admissible and
    the first time the end cell is popped its distance is minimal. Equal
    heuristics are expanded in the order they were queued.
    """

    def search(self) -> Optional[Cell]:
        grid = self.grid
        start, end = grid.start, grid.end
        counter = itertools.count()

        start_heuristic = 1 + manhattan(start, end)
        open_list: List[OpenEntry] = [(start_heuristic, next(counter), start.index, 1, None)]
        open_distance: Dict[int, int] = {start.index: 1}
        closed: Set[int] = set()

        while open_list:
            heuristic, _, index, distance, parent = heapq.heappop(open_list)
            if index in closed:
                continue
            self.checkpoint()
            closed.add(index)
            cell = grid.cell_by_index(index)
            cell.distance = distance
            cell.heuristic = heuristic
            cell.parent = parent
            self.visit(cell)
            if cell is end:
                return cell

            for neighbour in grid.open_neighbours(cell):
                if neighbour.index in closed:
                    continue
                candidate = distance + 1
                queued = open_distance.get(neighbour.index)
                if queued is not None and queued < candidate:
                    continue
                open_distance[neighbour.index] = candidate
                neighbour.heuristic = candidate + manhattan(neighbour, end)
                self.tag(neighbour, CellKind.HEAD)
                heapq.heappush(
                    open_list,
                    (neighbour.heuristic, next(counter), neighbour.index, candidate, index),
                )
        return None


__all__ = ["AStarSolver", "manhattan"]
