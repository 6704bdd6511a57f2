"""Grid maze carving and multi-algorithm solving engine."""

__all__ = [
    "Cell",
    "CellKind",
    "Grid",
    "MazeCarver",
    "create_maze",
    "SolverAlgorithm",
    "SolveStatus",
    "SolveSession",
    "SolveResult",
    "SolveController",
    "SolveHandle",
    "MazeError",
    "ConstructionError",
    "BusyError",
    "NoPathError",
    "CanceledError",
]

from .errors import BusyError, CanceledError, ConstructionError, MazeError, NoPathError
from .grid import Cell, CellKind, Grid
from .carver import MazeCarver, create_maze
from .session import SolverAlgorithm, SolveResult, SolveSession, SolveStatus
from .controller import SolveController, SolveHandle
