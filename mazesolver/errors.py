"""Exception hierarchy for maze construction and solving."""

from __future__ import annotations


class MazeError(Exception):
    """Base class for every error raised by the maze engine."""


class ConstructionError(MazeError, ValueError):
    """The maze could not be built with the requested parameters."""


class BusyError(MazeError, RuntimeError):
    """The grid is held by a running solve session."""


class NoPathError(MazeError):
    """The solver exhausted its frontier without reaching the end cell."""


class CanceledError(MazeError):
    """The solve observed its cancellation flag."""


__all__ = [
    "MazeError",
    "ConstructionError",
    "BusyError",
    "NoPathError",
    "CanceledError",
]
