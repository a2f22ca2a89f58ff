from __future__ import annotations

from typing import List, Optional, Tuple

from .grid import Coordinate, OccupancyGrid
from .matrix import Matrix, orientations
from .placement import can_place, projected_cells


def find_placement(grid: OccupancyGrid, matrix: Matrix) -> Optional[Tuple[int, int, int]]:
    """First legal (orientation, col, row) for `matrix`, or None.

    Orientations follow `orientations()`. Anchors range over every position
    where the matrix's bounding box could overlap the grid, including
    negative ones.
    """
    for index, candidate in enumerate(orientations(matrix)):
        h, w = candidate.shape
        for row in range(-(h - 1), grid.height):
            for col in range(-(w - 1), grid.width):
                if can_place(grid, projected_cells(candidate, col, row)):
                    return index, col, row
    return None


def can_be_placed_anywhere(grid: OccupancyGrid, matrix: Matrix) -> bool:
    return find_placement(grid, matrix) is not None


def valid_anchors(grid: OccupancyGrid, matrix: Matrix) -> List[Coordinate]:
    """All legal on-grid (col, row) anchors for `matrix` as given, without transforms."""
    anchors: List[Coordinate] = []
    for row in range(grid.height):
        for col in range(grid.width):
            if can_place(grid, projected_cells(matrix, col, row)):
                anchors.append((col, row))
    return anchors
