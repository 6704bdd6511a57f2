"""Grid search algorithms and the selector-to-class dispatch table."""

__all__ = [
    "AbstractSolver",
    "BreadthFirstSolver",
    "DepthFirstSolver",
    "AStarSolver",
    "WallFollowerSolver",
    "LeftWallFollower",
    "RightWallFollower",
    "SOLVERS",
    "get_solver",
]

from typing import Dict, Type

from ..session import SolverAlgorithm
from .astar import AStarSolver
from .base import AbstractSolver
from .bfs import BreadthFirstSolver
from .dfs import DepthFirstSolver
from .wall_follower import LeftWallFollower, RightWallFollower, WallFollowerSolver

SOLVERS: Dict[SolverAlgorithm, Type[AbstractSolver]] = {
    SolverAlgorithm.BFS: BreadthFirstSolver,
    SolverAlgorithm.DFS: DepthFirstSolver,
    SolverAlgorithm.A_STAR: AStarSolver,
    SolverAlgorithm.TURN_LEFT: LeftWallFollower,
    SolverAlgorithm.TURN_RIGHT: RightWallFollower,
}


def get_solver(algorithm: SolverAlgorithm) -> Type[AbstractSolver]:
    try:
        return SOLVERS[algorithm]
    except KeyError as exc:
        raise ValueError(f"Unknown solver algorithm: {algorithm!r}") from exc
