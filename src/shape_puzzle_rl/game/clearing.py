from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, FrozenSet, List, Optional

import numpy as np

from .grid import OccupancyGrid
from .rules import ScoringRules


@dataclass(frozen=True)
class FullLines:
    rows: FrozenSet[int]
    columns: FrozenSet[int]

    @property
    def total(self) -> int:
        return len(self.rows) + len(self.columns)


@dataclass
class ClearEvent:
    rows: FrozenSet[int] = frozenset()
    columns: FrozenSet[int] = frozenset()
    score_delta: int = 0
    released: List[Any] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.rows) + len(self.columns)


def find_full_lines(grid: OccupancyGrid) -> FullLines:
    """Full rows and full columns, both read from the same pre-clear board."""
    occupied = grid.grid != 0
    rows = frozenset(int(r) for r in np.where(np.all(occupied, axis=1))[0])
    columns = frozenset(int(c) for c in np.where(np.all(occupied, axis=0))[0])
    return FullLines(rows=rows, columns=columns)


def compute_score_delta(rows: Collection[int], columns: Collection[int],
                        rules: Optional[ScoringRules] = None) -> int:
    return (rules or ScoringRules()).score_delta(rows, columns)


def apply_clear(grid: OccupancyGrid, rows: Collection[int], columns: Collection[int]) -> List[Any]:
    """Empty the given rows and columns; return the handles released from cleared cells.

    A cell shared by a cleared row and column is emptied (and its handle
    released) once.
    """
    released: List[Any] = []
    for row in sorted(rows):
        for col in range(grid.width):
            handle = grid.clear_occupied(col, row)
            if handle is not None:
                released.append(handle)
    for col in sorted(columns):
        for row in range(grid.height):
            handle = grid.clear_occupied(col, row)
            if handle is not None:
                released.append(handle)
    return released


def resolve_lines(grid: OccupancyGrid, rules: Optional[ScoringRules] = None) -> ClearEvent:
    lines = find_full_lines(grid)
    if lines.total == 0:
        return ClearEvent()
    delta = compute_score_delta(lines.rows, lines.columns, rules)
    released = apply_clear(grid, lines.rows, lines.columns)
    return ClearEvent(rows=lines.rows, columns=lines.columns, score_delta=delta, released=released)


def resolve(grid: OccupancyGrid, rules: Optional[ScoringRules] = None) -> int:
    """Clear every full row and column and return the score earned (0 leaves the grid untouched)."""
    return resolve_lines(grid, rules).score_delta
