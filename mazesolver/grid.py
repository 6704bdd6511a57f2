"""Grid data model shared by the maze carver and the solvers."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .errors import BusyError

MIN_DIMENSION = 21
MAX_DIMENSION = 499

# Orthogonal offsets in clockwise order starting north.
NEIGHBOURS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class CellKind(IntEnum):
    NONE = -1
    EMPTY = 0
    WALL = 1
    START = 2
    END = 3
    HEAD = 4
    VISITED = 5
    SOLUTION = 6


@dataclass
class Cell:
    """One grid position.

    ``row``, ``col`` and ``index`` are fixed when the grid allocates the cell.
    ``parent`` holds the flat index of the predecessor cell, never the cell
    itself.
    """

    row: int
    col: int
    index: int
    kind: CellKind = CellKind.EMPTY
    distance: int = 0
    heuristic: int = 0
    parent: Optional[int] = None

    @property
    def is_wall(self) -> bool:
        return self.kind == CellKind.WALL

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.row, self.col)


def clamp_dimension(value: int) -> int:
    """Clamp a requested row/column count to an odd value in range."""

    value = int(value)
    if value < MIN_DIMENSION:
        return MIN_DIMENSION
    if value > MAX_DIMENSION:
        return MAX_DIMENSION
    if value % 2 == 0:
        return value + 1
    return value


class Grid:
    """Rectangular arena of cells with a single start and end cell."""

    def __init__(self, num_rows: int, num_cols: int) -> None:
        self._num_rows = clamp_dimension(num_rows)
        self._num_cols = clamp_dimension(num_cols)
        self._cells: List[Cell] = [
            Cell(row=r, col=c, index=r * self._num_cols + c)
            for r in range(self._num_rows)
            for c in range(self._num_cols)
        ]
        self._start_index = self._index(1, 0)
        self._end_index = self._index(self._num_rows - 2, self._num_cols - 1)
        self._cells[self._start_index].kind = CellKind.START
        self._cells[self._end_index].kind = CellKind.END
        self.difficult = False
        self._session_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Dimensions and lookups

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_cols(self) -> int:
        return self._num_cols

    @property
    def is_difficult(self) -> bool:
        return self.difficult

    @property
    def start(self) -> Cell:
        return self._cells[self._start_index]

    @property
    def end(self) -> Cell:
        return self._cells[self._end_index]

    def _index(self, row: int, col: int) -> int:
        return row * self._num_cols + col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._num_rows and 0 <= col < self._num_cols

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        if not self.in_bounds(row, col):
            return None
        return self._cells[self._index(row, col)]

    def cell_by_index(self, index: int) -> Cell:
        return self._cells[index]

    def cells(self) -> Iterator[Cell]:
        return iter(self._cells)

    def get_cell_kind(self, row: int, col: int) -> CellKind:
        cell = self.cell_at(row, col)
        if cell is None:
            return CellKind.NONE
        return cell.kind

    # ------------------------------------------------------------------
    # Predicates. Generation treats out-of-bounds as a wall while the
    # solvers skip out-of-bounds neighbours; both are kept separate.

    def is_wall(self, row: int, col: int) -> bool:
        cell = self.cell_at(row, col)
        return cell is None or cell.is_wall

    is_wall_or_oob = is_wall

    def in_bounds_and_open(self, row: int, col: int) -> bool:
        cell = self.cell_at(row, col)
        return cell is not None and not cell.is_wall

    def is_perimeter(self, row: int, col: int) -> bool:
        if not self.in_bounds(row, col):
            return False
        return row in (0, self._num_rows - 1) or col in (0, self._num_cols - 1)

    def open_neighbours(self, cell: Cell) -> Iterator[Cell]:
        """Yield in-bounds non-wall orthogonal neighbours of ``cell``."""

        for dr, dc in NEIGHBOURS:
            neighbour = self.cell_at(cell.row + dr, cell.col + dc)
            if neighbour is not None and not neighbour.is_wall:
                yield neighbour

    # ------------------------------------------------------------------
    # Solve support

    @property
    def busy(self) -> bool:
        return self._session_lock.locked()

    def claim(self) -> None:
        """Mark the grid as held by a solve session."""

        if not self._session_lock.acquire(blocking=False):
            raise BusyError("A solve is already running on this grid")

    def release(self) -> None:
        if self._session_lock.locked():
            self._session_lock.release()

    def reset_for_solve(self) -> None:
        """Clear per-solve state from every passable cell."""

        for cell in self._cells:
            if cell.is_wall:
                continue
            cell.distance = 0
            cell.heuristic = 0
            cell.parent = None
            cell.kind = CellKind.EMPTY
        self.start.kind = CellKind.START
        self.end.kind = CellKind.END

    def place_endpoints(self, start: Tuple[int, int], end: Tuple[int, int]) -> None:
        """Force the start and end cells to ``start`` and ``end``.

        Previous endpoint cells that still carry their tag are closed the
        same way a relocation closes them, so exactly one start and one end
        remain.
        """

        if start == end:
            raise ValueError("Start and end must be different cells")
        if not (self.in_bounds(*start) and self.in_bounds(*end)):
            raise ValueError(f"Endpoints {start} / {end} are out of bounds")
        self._close_endpoint(self.start)
        self._close_endpoint(self.end)
        self._start_index = self._index(*start)
        self._end_index = self._index(*end)
        self.start.kind = CellKind.START
        self.end.kind = CellKind.END

    def _close_endpoint(self, cell: Cell) -> None:
        if cell.kind not in (CellKind.START, CellKind.END):
            return
        if self.is_perimeter(cell.row, cell.col):
            cell.kind = CellKind.WALL
        else:
            cell.kind = CellKind.EMPTY

    def set_start(self, row: int, col: int) -> bool:
        return self._relocate(row, col, CellKind.START)

    def set_end(self, row: int, col: int) -> bool:
        return self._relocate(row, col, CellKind.END)

    def _relocate(self, row: int, col: int, kind: CellKind) -> bool:
        if self.busy:
            raise BusyError("Cannot move the start or end cell while solving")
        target = self.cell_at(row, col)
        if target is None:
            return False
        if kind == CellKind.START:
            current, other = self.start, self.end
        else:
            current, other = self.end, self.start
        if target is other:
            return False
        if target is current:
            return True
        if target.is_wall and not self._can_open(target):
            return False

        self._close_endpoint(current)
        target.kind = kind
        target.distance = 0
        target.heuristic = 0
        target.parent = None
        if kind == CellKind.START:
            self._start_index = target.index
        else:
            self._end_index = target.index
        return True

    def _can_open(self, cell: Cell) -> bool:
        if not self.is_perimeter(cell.row, cell.col):
            return False
        return any(True for _ in self.open_neighbours(cell))

    # ------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Snapshot of every cell kind as an ``int8`` array."""

        kinds = np.fromiter(
            (int(cell.kind) for cell in self._cells),
            dtype=np.int8,
            count=len(self._cells),
        )
        return kinds.reshape(self._num_rows, self._num_cols)

    def __repr__(self) -> str:
        return (
            f"Grid(num_rows={self._num_rows}, num_cols={self._num_cols}, "
            f"start={self.start.coord}, end={self.end.coord})"
        )


__all__ = [
    "Cell",
    "CellKind",
    "Grid",
    "NEIGHBOURS",
    "MIN_DIMENSION",
    "MAX_DIMENSION",
    "clamp_dimension",
]
