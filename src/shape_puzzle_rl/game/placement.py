from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from .grid import Coordinate, OccupancyGrid
from .matrix import Matrix


@dataclass
class Preview:
    cells: List[Coordinate]
    legal: bool


def projected_cells(matrix: Matrix, anchor_col: int, anchor_row: int) -> List[Coordinate]:
    """Map every filled matrix cell (r, c) to grid cell (anchor_col + c, anchor_row + r)."""
    h, w = matrix.shape
    cells: List[Coordinate] = []
    for r in range(h):
        for c in range(w):
            if matrix[r, c]:
                cells.append((anchor_col + c, anchor_row + r))
    return cells


def can_place(grid: OccupancyGrid, cells: Iterable[Coordinate]) -> bool:
    for x, y in cells:
        if not grid.is_inside(x, y):
            return False
        if grid.is_occupied(x, y):
            return False
    return True


def commit(grid: OccupancyGrid, cells: Iterable[Coordinate],
           handles: Optional[Mapping[Coordinate, Any]] = None) -> bool:
    """Occupy `cells` if the placement is legal; return whether anything was written.

    `handles` optionally maps cells to presentation objects kept on the grid.
    """
    cells = list(cells)
    if not can_place(grid, cells):
        return False
    handles = handles or {}
    for x, y in cells:
        grid.set_occupied(x, y, handles.get((x, y)))
    return True


def preview(grid: OccupancyGrid, matrix: Matrix, col: int, row: int) -> Preview:
    """Legality of a candidate drop without committing, plus its on-grid cells for highlighting."""
    cells = projected_cells(matrix, col, row)
    legal = can_place(grid, cells)
    return Preview(cells=[(x, y) for x, y in cells if grid.is_inside(x, y)], legal=legal)
