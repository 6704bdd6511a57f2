import io
import json
import time
import unittest
from unittest import mock

from mazesolver import (
    BusyError,
    CanceledError,
    MazeCarver,
    SolveController,
    SolverAlgorithm,
    SolveStatus,
    create_maze,
)
from mazesolver.controller import main
from mazesolver.solvers import AbstractSolver


class _ExplodingSolver(AbstractSolver):
    def search(self):
        raise RuntimeError("boom")


class ControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = create_maze(21, 21, False, seed=21)
        self.controller = SolveController()

    def tearDown(self) -> None:
        self.controller.cancel()

    def _slow_solve(self, **kwargs):
        self.controller.animation_speed = 0
        return self.controller.solve_async(self.grid, SolverAlgorithm.BFS, **kwargs)

    def test_initial_state(self) -> None:
        self.assertEqual(self.controller.status, SolveStatus.IDLE)
        self.assertEqual(self.controller.current_algorithm, SolverAlgorithm.A_STAR)
        self.assertEqual(self.controller.path_length, 0)
        self.assertEqual(self.controller.solve_time, 0.0)
        self.assertFalse(self.controller.running)

    def test_animation_speed_is_clamped(self) -> None:
        self.controller.animation_speed = 150
        self.assertEqual(self.controller.animation_speed, 100)
        self.controller.animation_speed = -5
        self.assertEqual(self.controller.animation_speed, 0)
        self.assertEqual(SolveController(animation_speed=250).animation_speed, 100)

    def test_sync_solve_updates_queries(self) -> None:
        result = self.controller.solve_sync(self.grid, SolverAlgorithm.DFS)
        self.assertTrue(result.solved)
        self.assertEqual(self.controller.status, SolveStatus.SOLVED)
        self.assertEqual(self.controller.current_algorithm, SolverAlgorithm.DFS)
        self.assertEqual(self.controller.path_length, result.path_length)
        self.assertGreaterEqual(self.controller.solve_time, 0.0)
        self.assertFalse(self.grid.busy)
        result.raise_for_status()

        payload = result.to_dict()
        self.assertEqual(payload["algorithm"], "dfs")
        self.assertEqual(payload["status"], "solved")
        self.assertIsNone(payload["error"])

    def test_async_solve_reports_progress_until_solved(self) -> None:
        reasons = []
        handle = self.controller.solve_async(self.grid, SolverAlgorithm.A_STAR, reasons.append)
        deadline = time.monotonic() + 10
        while not self.controller.poll().is_terminal:
            self.assertLess(time.monotonic(), deadline)
            time.sleep(0.005)

        self.assertEqual(reasons[-1], SolveStatus.SOLVED)
        self.assertTrue(set(reasons) <= {SolveStatus.RUNNING, SolveStatus.SOLVED})
        self.assertTrue(handle.done())
        self.assertFalse(self.controller.running)
        self.assertFalse(self.grid.busy)

        expected = SolveController().solve_sync(self.grid, SolverAlgorithm.BFS)
        self.assertEqual(handle.join().path_length, expected.path_length)
        self.assertEqual(self.controller.path_length, expected.path_length)

    def test_cancel_stops_worker(self) -> None:
        handle = self._slow_solve()
        self.assertEqual(handle.status, SolveStatus.RUNNING)
        self.assertTrue(self.controller.running)

        self.controller.cancel()

        self.assertTrue(handle.done())
        self.assertEqual(handle.status, SolveStatus.CANCELED)
        self.assertEqual(self.controller.status, SolveStatus.CANCELED)
        self.assertFalse(self.controller.running)
        self.assertFalse(self.grid.busy)
        with self.assertRaises(CanceledError):
            handle.join().raise_for_status()

    def test_handle_cancel_and_poll_callback(self) -> None:
        reasons = []
        handle = self._slow_solve(on_progress=reasons.append)
        self.assertEqual(handle.poll(), SolveStatus.RUNNING)
        result = handle.cancel()
        self.assertEqual(result.status, SolveStatus.CANCELED)
        self.assertEqual(self.controller.poll(), SolveStatus.CANCELED)
        self.assertEqual(reasons, [SolveStatus.RUNNING, SolveStatus.CANCELED])

    def test_controller_cancel_notifies_callback(self) -> None:
        reasons = []
        self._slow_solve(on_progress=reasons.append)
        self.assertEqual(self.controller.poll(), SolveStatus.RUNNING)

        self.controller.cancel()

        self.assertEqual(reasons, [SolveStatus.RUNNING, SolveStatus.CANCELED])
        self.assertEqual(self.controller.poll(), SolveStatus.CANCELED)
        self.assertEqual(reasons, [SolveStatus.RUNNING, SolveStatus.CANCELED])

    def test_terminal_status_stays_until_next_solve(self) -> None:
        reasons = []
        self.controller.solve_async(self.grid, SolverAlgorithm.BFS, reasons.append)
        deadline = time.monotonic() + 10
        while not self.controller.poll().is_terminal:
            self.assertLess(time.monotonic(), deadline)
            time.sleep(0.005)
        delivered = list(reasons)
        length = self.controller.path_length

        self.assertEqual(self.controller.poll(), SolveStatus.SOLVED)
        self.assertEqual(self.controller.status, SolveStatus.SOLVED)
        self.assertEqual(self.controller.path_length, length)
        self.assertEqual(reasons, delivered)

        self._slow_solve()
        self.assertEqual(self.controller.status, SolveStatus.RUNNING)
        self.assertEqual(self.controller.path_length, 0)

    def test_busy_grid_rejects_changes(self) -> None:
        self._slow_solve()
        with self.assertRaises(BusyError):
            MazeCarver(seed=1).carve(self.grid)
        with self.assertRaises(BusyError):
            self.grid.set_start(1, 1)
        with self.assertRaises(BusyError):
            SolveController().solve_sync(self.grid)
        with self.assertRaises(BusyError):
            self.controller.solve_async(create_maze(21, 21, seed=2))

        self.controller.cancel()
        self.controller.animation_speed = 100
        self.assertTrue(self.grid.set_start(1, 1))
        self.assertTrue(self.controller.solve_sync(self.grid).solved)

    def test_worker_errors_are_reported(self) -> None:
        with mock.patch("mazesolver.controller.get_solver", return_value=_ExplodingSolver):
            with self.assertLogs("mazesolver.controller", level="ERROR"):
                handle = self.controller.solve_async(self.grid)
                with self.assertRaises(RuntimeError):
                    handle.join()
        self.assertEqual(handle.status, SolveStatus.FAILED)
        self.assertFalse(self.grid.busy)


class CommandLineTests(unittest.TestCase):
    def _run(self, *argv: str) -> dict:
        buffer = io.StringIO()
        with mock.patch("sys.stdout", buffer):
            main(list(argv))
        return json.loads(buffer.getvalue())

    def test_sync_run_prints_result(self) -> None:
        payload = self._run("--rows", "10", "--cols", "30", "--seed", "4", "--algorithm", "bfs")
        self.assertEqual((payload["rows"], payload["cols"]), (21, 31))
        self.assertEqual(payload["status"], "solved")
        self.assertEqual(payload["start"], [1, 0])
        self.assertEqual(payload["end"], [19, 30])
        self.assertFalse(payload["difficult"])

    def test_async_run_matches_sync_length(self) -> None:
        sync = self._run("-r", "25", "-c", "25", "-s", "6", "-d", "-a", "bfs")
        threaded = self._run("-r", "25", "-c", "25", "-s", "6", "-d", "-a", "astar", "--async", "--poll-interval", "0.001")
        self.assertTrue(threaded["difficult"])
        self.assertEqual(threaded["status"], "solved")
        self.assertEqual(threaded["path_length"], sync["path_length"])


if __name__ == "__main__":
    unittest.main()
