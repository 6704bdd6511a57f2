#!/usr/bin/env python3
"""Carve a batch of mazes and compare every solver on each of them."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mazesolver import CellKind, SolveController, SolverAlgorithm, create_maze


def _explored_share(kinds: np.ndarray) -> float:
    passable = kinds != int(CellKind.WALL)
    touched = np.isin(
        kinds,
        [int(CellKind.HEAD), int(CellKind.VISITED), int(CellKind.SOLUTION)],
    )
    total = int(passable.sum())
    return float(touched.sum()) / total if total else 0.0


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--count", type=int, default=5, help="Number of mazes to carve")
    parser.add_argument("--rows", type=int, default=121)
    parser.add_argument("--cols", type=int, default=121)
    parser.add_argument("--difficult", action="store_true")
    parser.add_argument("--seed", type=int, default=0, help="Seed of the first maze; later mazes add one")
    parser.add_argument("--output", type=Path, default=None, help="Optional JSON report path")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    controller = SolveController()
    rows: List[Dict[str, object]] = []

    for index in range(args.count):
        seed = args.seed + index
        grid = create_maze(args.rows, args.cols, args.difficult, seed=seed)
        for algorithm in SolverAlgorithm:
            result = controller.solve_sync(grid, algorithm)
            explored = _explored_share(grid.to_array())
            row = result.to_dict()
            row.update({"seed": seed, "explored": explored})
            rows.append(row)
            print(
                f"[{index + 1}/{args.count}] seed={seed} {algorithm.value:<10} "
                f"{result.status.value:<8} length={result.path_length:<6} "
                f"time={result.solve_time:.3f}s explored={explored:.1%}"
            )

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(rows, indent=2), encoding="utf-8")
        print(f"Wrote {len(rows)} runs to {args.output}")


if __name__ == "__main__":
    main()
