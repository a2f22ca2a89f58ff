from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np


Coordinate = Tuple[int, int]


class OccupancyGrid:
    """Fixed-size 0/1 occupancy board.

    Cells are addressed as (x, y) = (column, row); the backing array is
    indexed ``[y, x]``. Each occupied cell may carry an opaque handle that the
    presentation layer uses to find the visual block to destroy on clear.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) < 1 or int(height) < 1:
            raise ValueError(f"grid dimensions must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
        self._handles: Dict[Coordinate, Any] = {}

    def reset(self) -> None:
        self.grid.fill(0)
        self._handles.clear()

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        # Off-grid reads are not occupied; legality is the placement engine's job.
        if not self.is_inside(x, y):
            return False
        return bool(self.grid[y, x])

    def _check_inside(self, x: int, y: int) -> None:
        # numpy would wrap negative indices to the far side of the board
        if not self.is_inside(x, y):
            raise IndexError(f"cell ({x}, {y}) is outside the {self.width}x{self.height} grid")

    def set_occupied(self, x: int, y: int, handle: Any = None) -> None:
        self._check_inside(x, y)
        self.grid[y, x] = 1
        if handle is not None:
            self._handles[(x, y)] = handle

    def clear_occupied(self, x: int, y: int) -> Optional[Any]:
        """Empty the cell and return the handle that was attached to it, if any."""
        self._check_inside(x, y)
        self.grid[y, x] = 0
        return self._handles.pop((x, y), None)

    def handle_at(self, x: int, y: int) -> Optional[Any]:
        return self._handles.get((x, y))

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def __repr__(self) -> str:
        return f"OccupancyGrid({self.width}x{self.height}, occupied={self.occupied_count()})"
