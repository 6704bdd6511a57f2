"""Run one solver at a time against a grid, synchronously or on a worker.

The worker thread writes cell state without synchronisation. Reading the grid
while a solve is RUNNING is only good enough for display; read it for real
after the handle reports a terminal status.
"""

from __future__ import annotations

import argparse
import json
import logging
import threading
import time
from typing import Callable, List, Optional

from .carver import create_maze
from .errors import BusyError, CanceledError
from .grid import Grid
from .session import SolverAlgorithm, SolveResult, SolveSession, SolveStatus, clamp_speed
from .solvers import get_solver

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[SolveStatus], None]


def run_session(grid: Grid, session: SolveSession) -> SolveResult:
    """Reset the board, run the session's algorithm and mark the path.

    The caller must hold the grid claim.
    """

    solver_cls = get_solver(session.algorithm)
    session.status = SolveStatus.RUNNING
    started = time.perf_counter()
    solver = None
    try:
        grid.reset_for_solve()
        solver = solver_cls(grid, session)
        end = solver.search()
        if session.cancelled:
            raise CanceledError(f"{session.algorithm.value} canceled")
        if end is None:
            session.path_length = 0
            session.status = SolveStatus.NO_PATH
            logger.warning("%s found no path", session.algorithm.value)
        else:
            session.path_length = solver.mark_path(end)
            session.status = SolveStatus.SOLVED
    except CanceledError:
        session.status = SolveStatus.CANCELED
        logger.info("%s canceled", session.algorithm.value)
    finally:
        session.solve_time = time.perf_counter() - started
        if solver is not None:
            session.visited_cells = solver.visited

    if session.status == SolveStatus.SOLVED:
        logger.info(
            "%s solved in %.3fs, length %d",
            session.algorithm.value,
            session.solve_time,
            session.path_length,
        )
    return session.result()


class SolveHandle:
    """Handle on a background solve.

    ``status`` peeks without blocking, ``poll`` is meant to be called from
    the caller's own timer loop and ``join`` blocks until the worker exits.
    """

    def __init__(
        self,
        session: SolveSession,
        thread: threading.Thread,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.session = session
        self._thread = thread
        self._on_progress = on_progress

    @property
    def status(self) -> SolveStatus:
        return self.session.status

    def done(self) -> bool:
        return not self._thread.is_alive()

    def poll(self) -> SolveStatus:
        status = self.session.status
        if status.is_terminal:
            self._thread.join()
        if self._on_progress is not None:
            self._on_progress(status)
        return status

    def join(self, timeout: Optional[float] = None) -> SolveResult:
        self._thread.join(timeout)
        if self.session.error is not None and not self._thread.is_alive():
            raise self.session.error
        return self.session.result()

    def cancel(self) -> SolveResult:
        """Ask the worker to stop and wait until it has."""

        self.session.cancel()
        self._thread.join()
        return self.session.result()


class SolveController:
    """Drive solver runs and keep the figures of the latest one."""

    def __init__(
        self,
        *,
        algorithm: SolverAlgorithm = SolverAlgorithm.A_STAR,
        animation_speed: int = 100,
    ) -> None:
        self.algorithm = algorithm
        self._animation_speed = clamp_speed(animation_speed)
        self._session: Optional[SolveSession] = None
        self._handle: Optional[SolveHandle] = None

    # ------------------------------------------------------------------
    # Query accessors

    @property
    def current_algorithm(self) -> SolverAlgorithm:
        return self.algorithm

    @property
    def animation_speed(self) -> int:
        return self._animation_speed

    @animation_speed.setter
    def animation_speed(self, value: int) -> None:
        self._animation_speed = clamp_speed(value)

    @property
    def status(self) -> SolveStatus:
        """Status of the latest session.

        IDLE until the first solve. A terminal status, with the path length
        and solve time that go with it, stays readable until the next solve
        starts; ``poll`` and ``cancel`` deliver it to ``on_progress`` once.
        """

        if self._session is None:
            return SolveStatus.IDLE
        return self._session.status

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.done()

    @property
    def path_length(self) -> int:
        return self._session.path_length if self._session is not None else 0

    @property
    def solve_time(self) -> float:
        return self._session.solve_time if self._session is not None else 0.0

    # ------------------------------------------------------------------

    def _new_session(self, algorithm: Optional[SolverAlgorithm]) -> SolveSession:
        if self.running:
            raise BusyError("This controller is already running a solve")
        if algorithm is None:
            algorithm = self.algorithm
        get_solver(algorithm)
        self.algorithm = algorithm
        self._handle = None
        self._session = SolveSession(
            algorithm=self.algorithm,
            animation_speed=self._animation_speed,
        )
        return self._session

    def solve_sync(self, grid: Grid, algorithm: Optional[SolverAlgorithm] = None) -> SolveResult:
        grid.claim()
        try:
            session = self._new_session(algorithm)
            return run_session(grid, session)
        finally:
            grid.release()

    def solve_async(
        self,
        grid: Grid,
        algorithm: Optional[SolverAlgorithm] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> SolveHandle:
        grid.claim()
        try:
            session = self._new_session(algorithm)
        except Exception:
            grid.release()
            raise
        session.status = SolveStatus.RUNNING

        def worker() -> None:
            try:
                run_session(grid, session)
            except Exception as exc:
                logger.exception("Solver %s failed", session.algorithm.value)
                session.error = exc
                session.status = SolveStatus.FAILED
            finally:
                grid.release()

        thread = threading.Thread(
            target=worker,
            name=f"maze-solver-{session.algorithm.value}",
            daemon=True,
        )
        self._handle = SolveHandle(session, thread, on_progress)
        thread.start()
        return self._handle

    def poll(self) -> SolveStatus:
        if self._handle is None:
            return self.status
        status = self._handle.poll()
        if status.is_terminal:
            self._handle = None
        return status

    def cancel(self) -> None:
        """Cancel the background solve, returning once the worker has exited."""

        if self._handle is None:
            return
        self._handle.cancel()
        self._handle.poll()
        self._handle = None


__all__ = ["SolveController", "SolveHandle", "run_session"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Carve a maze and solve it")
    parser.add_argument("-r", "--rows", type=int, default=121, help="Maze rows")
    parser.add_argument("-c", "--cols", type=int, default=121, help="Maze columns")
    parser.add_argument("-d", "--difficult", action="store_true", help="Produce a maze with loops")
    parser.add_argument(
        "-a",
        "--algorithm",
        choices=[algo.value for algo in SolverAlgorithm],
        default=SolverAlgorithm.A_STAR.value,
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="Random seed value")
    parser.add_argument(
        "--speed",
        type=int,
        default=100,
        help="Animation speed 0-100; below 100 each step sleeps",
    )
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Solve on a worker thread and poll for progress",
    )
    parser.add_argument("--poll-interval", type=float, default=0.05)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    grid = create_maze(args.rows, args.cols, args.difficult, seed=args.seed)
    controller = SolveController(
        algorithm=SolverAlgorithm(args.algorithm),
        animation_speed=args.speed,
    )
    if args.use_async:
        handle = controller.solve_async(grid)
        try:
            while not controller.poll().is_terminal:
                time.sleep(args.poll_interval)
        except KeyboardInterrupt:
            controller.cancel()
        result = handle.join()
    else:
        result = controller.solve_sync(grid)

    payload = result.to_dict()
    payload.update(
        {
            "rows": grid.num_rows,
            "cols": grid.num_cols,
            "difficult": grid.is_difficult,
            "start": list(grid.start.coord),
            "end": list(grid.end.coord),
        }
    )
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
