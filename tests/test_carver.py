import unittest
from collections import deque
from unittest import mock

import numpy as np

from mazesolver import BusyError, CellKind, ConstructionError, Grid, MazeCarver, create_maze


def _open_mask(grid: Grid) -> np.ndarray:
    return grid.to_array() != CellKind.WALL


def _edge_count(mask: np.ndarray) -> int:
    vertical = np.count_nonzero(mask[1:, :] & mask[:-1, :])
    horizontal = np.count_nonzero(mask[:, 1:] & mask[:, :-1])
    return int(vertical + horizontal)


def _reachable(mask: np.ndarray, start) -> int:
    rows, cols = mask.shape
    seen = {start}
    queue = deque([start])
    while queue:
        r, c = queue.popleft()
        for dr, dc in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nr, nc = r + dr, c + dc
            if 0 <= nr < rows and 0 <= nc < cols and mask[nr, nc] and (nr, nc) not in seen:
                seen.add((nr, nc))
                queue.append((nr, nc))
    return len(seen)


class CarverTests(unittest.TestCase):
    def test_perfect_maze_is_a_spanning_tree(self) -> None:
        for seed in range(5):
            grid = create_maze(21, 35, False, seed=seed)
            mask = _open_mask(grid)
            open_cells = int(mask.sum())
            self.assertEqual(_edge_count(mask), open_cells - 1, f"seed={seed}")
            self.assertEqual(_reachable(mask, grid.start.coord), open_cells, f"seed={seed}")

    def test_every_room_is_open(self) -> None:
        grid = create_maze(25, 25, False, seed=4)
        for row in range(1, grid.num_rows, 2):
            for col in range(1, grid.num_cols, 2):
                self.assertFalse(grid.is_wall(row, col), (row, col))

    def test_fixed_endpoints(self) -> None:
        grid = create_maze(21, 21, False, seed=2)
        self.assertEqual(grid.start.coord, (1, 0))
        self.assertEqual(grid.end.coord, (19, 20))
        kinds = grid.to_array()
        self.assertEqual(int(np.count_nonzero(kinds == CellKind.START)), 1)
        self.assertEqual(int(np.count_nonzero(kinds == CellKind.END)), 1)
        self.assertFalse(grid.is_difficult)

    def test_same_seed_carves_same_maze(self) -> None:
        first = create_maze(41, 41, True, seed=123)
        second = create_maze(41, 41, True, seed=123)
        np.testing.assert_array_equal(first.to_array(), second.to_array())

    def test_difficult_mode_adds_one_loop_per_opening(self) -> None:
        grid = create_maze(21, 31, True, seed=9)
        self.assertTrue(grid.is_difficult)
        mask = _open_mask(grid)
        open_cells = int(mask.sum())
        loops = _edge_count(mask) - (open_cells - 1)
        self.assertEqual(loops, max(grid.num_rows, grid.num_cols))
        self.assertEqual(_reachable(mask, grid.start.coord), open_cells)

    def test_recarving_existing_grid(self) -> None:
        grid = create_maze(21, 21, False, seed=5)
        self.assertTrue(grid.set_start(1, 1))
        MazeCarver(seed=6).carve(grid)
        self.assertEqual(grid.start.coord, (1, 0))
        self.assertEqual(grid.get_cell_kind(1, 1), CellKind.EMPTY)
        self.assertEqual(int(np.count_nonzero(grid.to_array() == CellKind.START)), 1)

    def test_difficult_mode_without_removable_walls_fails(self) -> None:
        with mock.patch.object(MazeCarver, "_is_straight_wall", return_value=False), \
                mock.patch("mazesolver.carver.KNOCKOUT_ATTEMPTS_PER_CELL", 1):
            with self.assertRaises(ConstructionError):
                create_maze(21, 21, True, seed=1)

    def test_start_room_on_a_wall_fails(self) -> None:
        def all_walls(grid: Grid) -> None:
            for cell in grid.cells():
                cell.kind = CellKind.WALL

        with mock.patch.object(MazeCarver, "_init_cells", staticmethod(all_walls)):
            with self.assertRaises(ConstructionError):
                create_maze(21, 21, False, seed=1)

    def test_construction_error_is_a_value_error(self) -> None:
        self.assertTrue(issubclass(ConstructionError, ValueError))

    def test_carving_a_busy_grid_is_rejected(self) -> None:
        grid = create_maze(21, 21, False, seed=5)
        before = grid.to_array()
        grid.claim()
        try:
            with self.assertRaises(BusyError):
                MazeCarver(seed=1).carve(grid)
        finally:
            grid.release()
        np.testing.assert_array_equal(grid.to_array(), before)


if __name__ == "__main__":
    unittest.main()
