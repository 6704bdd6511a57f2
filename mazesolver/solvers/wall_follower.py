"""Wall-following solvers that keep one hand on the wall."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Optional, Set, Tuple

from ..grid import NEIGHBOURS, Cell, CellKind
from .base import AbstractSolver

logger = logging.getLogger(__name__)

# Cells kept tagged as the moving head of the walk.
TRAIL_LENGTH = 50

# Index into NEIGHBOURS (north, east, south, west).
EAST = 1


class WallFollowerSolver(AbstractSolver):
    """Walk the maze turning toward ``turn`` whenever possible.

    ``turn`` is -1 to hug the left wall and +1 to hug the right wall. Every
    cell keeps the step number of its first visit as ``distance``; the path
    shown afterwards descends those numbers from the end cell back to the
    start.
    """

    turn = -1

    def search(self) -> Optional[Cell]:
        grid = self.grid
        cell, end = grid.start, grid.end
        orientation = EAST
        step = 1
        cell.distance = step
        self.visit(cell)

        trail: Deque[Cell] = deque()
        seen: Set[Tuple[int, int]] = set()
        try:
            while cell is not end:
                self.checkpoint()
                state = (cell.index, orientation)
                if state in seen:
                    logger.debug("%s is walking in circles", type(self).__name__)
                    return None
                seen.add(state)

                moved = self._advance(cell, orientation)
                if moved is None:
                    return None
                cell, orientation = moved
                step += 1
                if not cell.distance:
                    cell.distance = step
                    self.visit(cell)
                self.tag(cell, CellKind.HEAD)
                trail.append(cell)
                if len(trail) > TRAIL_LENGTH:
                    self.tag(trail.popleft(), CellKind.VISITED)
            return cell
        finally:
            while trail:
                self.tag(trail.popleft(), CellKind.VISITED)

    def _advance(self, cell: Cell, orientation: int) -> Optional[Tuple[Cell, int]]:
        # Preferred side, straight ahead, opposite side, then back.
        for offset in (self.turn, 0, -self.turn, 2):
            direction = (orientation + offset) % 4
            dr, dc = NEIGHBOURS[direction]
            if self.grid.in_bounds_and_open(cell.row + dr, cell.col + dc):
                return self.grid.cell_at(cell.row + dr, cell.col + dc), direction
        return None

    def mark_path(self, end: Cell) -> int:
        start = self.grid.start
        cell = end
        self.tag(cell, CellKind.SOLUTION)
        length = 1
        while cell is not start:
            best: Optional[Cell] = None
            for neighbour in self.grid.open_neighbours(cell):
                if not 0 < neighbour.distance < cell.distance:
                    continue
                if best is None or neighbour.distance < best.distance:
                    best = neighbour
            if best is None:
                logger.warning(
                    "Backward walk stuck at (%d, %d) after %d cells",
                    cell.row,
                    cell.col,
                    length,
                )
                break
            cell = best
            self.tag(cell, CellKind.SOLUTION)
            length += 1
        return length


class LeftWallFollower(WallFollowerSolver):
    turn = -1


class RightWallFollower(WallFollowerSolver):
    turn = 1


__all__ = [
    "WallFollowerSolver",
    "LeftWallFollower",
    "RightWallFollower",
    "TRAIL_LENGTH",
]
