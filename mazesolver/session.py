"""Per-solve session state and results."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import CanceledError, NoPathError

# Per-step delay at animation speed 0, in seconds.
MAX_STEP_DELAY = 0.05


class SolverAlgorithm(Enum):
    BFS = "bfs"
    DFS = "dfs"
    A_STAR = "astar"
    TURN_LEFT = "turn-left"
    TURN_RIGHT = "turn-right"


class SolveStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    SOLVED = "solved"
    NO_PATH = "no-path"
    CANCELED = "canceled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self not in (SolveStatus.IDLE, SolveStatus.RUNNING)


def clamp_speed(speed: int) -> int:
    return max(0, min(int(speed), 100))


@dataclass
class SolveSession:
    """Transient state of one solver run.

    The cancel event is written by the initiating thread and polled by the
    solver at every step.
    """

    algorithm: SolverAlgorithm
    animation_speed: int = 100
    cancel_event: threading.Event = field(default_factory=threading.Event)
    status: SolveStatus = SolveStatus.IDLE
    path_length: int = 0
    solve_time: float = 0.0
    visited_cells: int = 0
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.animation_speed = clamp_speed(self.animation_speed)

    @property
    def step_delay(self) -> float:
        return MAX_STEP_DELAY * (100 - self.animation_speed) / 100

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        self.cancel_event.set()

    def result(self) -> "SolveResult":
        return SolveResult(
            algorithm=self.algorithm,
            status=self.status,
            path_length=self.path_length,
            solve_time=self.solve_time,
            visited_cells=self.visited_cells,
            error=self.error,
        )


@dataclass
class SolveResult:
    algorithm: SolverAlgorithm
    status: SolveStatus
    path_length: int
    solve_time: float
    visited_cells: int
    error: Optional[BaseException] = None

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED

    def raise_for_status(self) -> None:
        """Raise the error matching a non-solved terminal status."""

        if self.status == SolveStatus.NO_PATH:
            raise NoPathError(f"{self.algorithm.value}: no path found")
        if self.status == SolveStatus.CANCELED:
            raise CanceledError(f"{self.algorithm.value}: solve canceled")
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm.value,
            "status": self.status.value,
            "path_length": self.path_length,
            "solve_time": self.solve_time,
            "visited_cells": self.visited_cells,
            "error": repr(self.error) if self.error is not None else None,
        }


__all__ = [
    "MAX_STEP_DELAY",
    "SolverAlgorithm",
    "SolveStatus",
    "SolveSession",
    "SolveResult",
    "clamp_speed",
]
