from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Tuple

import numpy as np

from .matrix import Matrix, MatrixLike, as_matrix, flip_horizontal, rotate_ccw, rotate_cw, trim_shape


logger = logging.getLogger(__name__)

# up, right, down, left as (dr, dc)
_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))


class Shape:
    """A binary matrix plus its placed flag.

    The stored matrix is a read-only copy; transforms swap in a new array and
    are ignored once the shape has been placed.
    """

    def __init__(self, matrix: MatrixLike):
        self._matrix = self._freeze(as_matrix(matrix))
        self.placed = False

    @staticmethod
    def _freeze(m: Matrix) -> Matrix:
        m.setflags(write=False)
        return m

    @property
    def matrix(self) -> Matrix:
        return self._matrix

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self._matrix))

    def _transform(self, transformation: Callable[[Matrix], Matrix]) -> None:
        if self.placed:
            return
        self._matrix = self._freeze(transformation(self._matrix))

    def rotate_cw(self) -> None:
        self._transform(rotate_cw)

    def rotate_ccw(self) -> None:
        self._transform(rotate_ccw)

    def flip(self) -> None:
        self._transform(flip_horizontal)

    def orient(self, orientation: int) -> None:
        """Apply orientation index ``o``: ``o // 2`` clockwise turns, then a flip if ``o`` is odd."""
        for _ in range((orientation % 8) // 2):
            self.rotate_cw()
        if orientation % 2:
            self.flip()

    def place(self) -> None:
        self.placed = True

    def cells_at(self, base_col: int, base_row: int) -> List[Tuple[int, int]]:
        """Grid (x, y) cells covered when the matrix's (0, 0) sits at (base_col, base_row)."""
        h, w = self._matrix.shape
        cells: List[Tuple[int, int]] = []
        for r in range(h):
            for c in range(w):
                if self._matrix[r, c]:
                    cells.append((base_col + c, base_row + r))
        return cells

    def __repr__(self) -> str:
        return f"Shape(cells={self.cell_count}, size={self._matrix.shape}, placed={self.placed})"


class ShapeFactory:
    """Grows random edge-connected shapes on a small scratch grid."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def _grow(self, min_cells: int, max_cells: int, scratch_size: int) -> np.ndarray:
        if min_cells < 1 or max_cells < min_cells:
            raise ValueError(f"invalid cell range [{min_cells}, {max_cells}]")
        if scratch_size < 1:
            raise ValueError(f"scratch_size must be positive, got {scratch_size}")

        grid = np.zeros((scratch_size, scratch_size), dtype=np.int8)
        target = self.rng.randint(min_cells, max_cells)

        start = (self.rng.randint(0, scratch_size - 1), self.rng.randint(0, scratch_size - 1))
        grid[start] = 1
        active: List[Tuple[int, int]] = [start]
        placed = 1

        def inside(r: int, c: int) -> bool:
            return 0 <= r < scratch_size and 0 <= c < scratch_size

        def touches_exactly_one(r: int, c: int) -> bool:
            occupied = 0
            for dr, dc in _DIRECTIONS:
                nr, nc = r + dr, c + dc
                if inside(nr, nc) and grid[nr, nc] == 1:
                    occupied += 1
            return occupied == 1

        while placed < target and active:
            r, c = self.rng.choice(active)
            neighbors = [
                (r + dr, c + dc)
                for dr, dc in _DIRECTIONS
                if inside(r + dr, c + dc) and grid[r + dr, c + dc] == 0 and touches_exactly_one(r + dr, c + dc)
            ]
            if neighbors:
                nxt = self.rng.choice(neighbors)
                grid[nxt] = 1
                active.append(nxt)
                placed += 1
            else:
                # dead end
                active.remove((r, c))

        if placed < target:
            logger.debug(f"shape growth stopped early at {placed}/{target} cells")
        return grid

    def generate(self, min_cells: int = 3, max_cells: int = 5, scratch_size: int = 3) -> Matrix:
        """Return a trimmed matrix for one connected shape of roughly ``min_cells..max_cells`` cells.

        Growth may dead-end before the drawn target is reached; the smaller
        shape is returned as is.
        """
        return trim_shape(self._grow(min_cells, max_cells, scratch_size))

    def make_shape(self, min_cells: int = 3, max_cells: int = 5, scratch_size: int = 3) -> Shape:
        return Shape(self.generate(min_cells, max_cells, scratch_size))
