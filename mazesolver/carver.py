"""Randomized backtracking maze carver."""

from __future__ import annotations

import logging
import random
from typing import List, Optional

from .errors import BusyError, ConstructionError
from .grid import Cell, CellKind, Grid

logger = logging.getLogger(__name__)

# Rooms sit on odd/odd coordinates two cells apart; the wall between two
# rooms is one step along the same direction.
ROOM_OFFSETS = ((-2, 0), (0, 2), (2, 0), (0, -2))
WALL_OFFSETS = ((-1, 0), (0, 1), (1, 0), (0, -1))

# Random draws allowed per extra opening in difficult mode.
KNOCKOUT_ATTEMPTS_PER_CELL = 8


class MazeCarver:
    """Carve a perfect maze into a grid, optionally adding extra loops."""

    def __init__(self, *, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def carve(self, grid: Grid, *, difficult: bool = False) -> Grid:
        if grid.busy:
            raise BusyError("Cannot carve a new maze while a solve is running")

        self._init_cells(grid)
        self._backtrack(grid)

        grid.place_endpoints((1, 0), (grid.num_rows - 2, grid.num_cols - 1))
        grid.difficult = difficult
        if difficult:
            self._knock_out_walls(grid)

        logger.info(
            "Carved %dx%d maze (difficult=%s, seed=%s)",
            grid.num_rows,
            grid.num_cols,
            difficult,
            self.seed,
        )
        return grid

    # ------------------------------------------------------------------

    @staticmethod
    def _init_cells(grid: Grid) -> None:
        for cell in grid.cells():
            cell.distance = 0
            cell.heuristic = 0
            cell.parent = None
            if cell.row % 2 == 1 and cell.col % 2 == 1:
                cell.kind = CellKind.EMPTY
            else:
                cell.kind = CellKind.WALL

    def _backtrack(self, grid: Grid) -> None:
        row = self._rng.randrange(grid.num_rows - 2) // 2 * 2 + 1
        col = self._rng.randrange(grid.num_cols - 2) // 2 * 2 + 1
        start = grid.cell_at(row, col)
        if start is None or start.is_wall:
            raise ConstructionError(f"Start room ({row}, {col}) is not a room")
        logger.debug("Backtracking from room (%d, %d)", row, col)

        visited = {start.index}
        stack: List[Cell] = [start]
        while stack:
            cell = stack[-1]
            rotation = self._rng.randrange(4)
            for i in range(4):
                direction = (i + rotation) % 4
                dr, dc = ROOM_OFFSETS[direction]
                neighbour = grid.cell_at(cell.row + dr, cell.col + dc)
                if neighbour is None or neighbour.index in visited:
                    continue
                wr, wc = WALL_OFFSETS[direction]
                wall = grid.cell_at(cell.row + wr, cell.col + wc)
                if wall is None:
                    raise ConstructionError(
                        f"Wall between ({cell.row}, {cell.col}) and "
                        f"({neighbour.row}, {neighbour.col}) is out of bounds"
                    )
                wall.kind = CellKind.EMPTY
                visited.add(neighbour.index)
                stack.append(neighbour)
                break
            else:
                stack.pop()

    def _knock_out_walls(self, grid: Grid) -> None:
        count = max(grid.num_rows, grid.num_cols)
        attempts = grid.num_rows * grid.num_cols * KNOCKOUT_ATTEMPTS_PER_CELL
        for _ in range(count):
            for _ in range(attempts):
                row = self._rng.randrange(grid.num_rows - 2) + 1
                col = self._rng.randrange(grid.num_cols - 2) + 1
                if self._is_straight_wall(grid, row, col):
                    break
            else:
                raise ConstructionError("No removable wall left for difficult mode")
            grid.cell_at(row, col).kind = CellKind.EMPTY

    @staticmethod
    def _is_straight_wall(grid: Grid, row: int, col: int) -> bool:
        """A wall flanked by walls on exactly one axis (not an end or a T)."""

        if not grid.is_wall_or_oob(row, col):
            return False
        walls = int(grid.is_wall_or_oob(row - 1, col)) + int(grid.is_wall_or_oob(row + 1, col))
        if walls == 1:
            return False
        walls += int(grid.is_wall_or_oob(row, col - 1)) + int(grid.is_wall_or_oob(row, col + 1))
        return walls == 2


def create_maze(
    rows: int,
    cols: int,
    difficult: bool = False,
    *,
    seed: Optional[int] = None,
) -> Grid:
    """Allocate a grid (dimensions clamped to odd values) and carve a maze."""

    grid = Grid(rows, cols)
    return MazeCarver(seed=seed).carve(grid, difficult=difficult)


__all__ = ["MazeCarver", "create_maze"]
