from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np


Matrix = np.ndarray
MatrixLike = Union[np.ndarray, Sequence[Sequence[int]]]


def as_matrix(rows: MatrixLike) -> Matrix:
    """Return `rows` as a fresh int8 0/1 array, asserting it is a non-empty rectangle."""
    if isinstance(rows, np.ndarray):
        m = rows.astype(np.int8, copy=True)
    else:
        assert len(rows) > 0, "matrix must have at least one row"
        widths = {len(row) for row in rows}
        assert len(widths) == 1, "matrix rows must have equal length"
        m = np.array(rows, dtype=np.int8)
    assert m.ndim == 2 and m.shape[0] >= 1 and m.shape[1] >= 1, "matrix must be 2-D and non-empty"
    return m


def rotate_cw(m: Matrix) -> Matrix:
    # result[c][rows - 1 - r] = m[r][c]
    return np.rot90(m, k=-1).copy()


def rotate_ccw(m: Matrix) -> Matrix:
    # result[cols - 1 - c][r] = m[r][c]
    return np.rot90(m, k=1).copy()


def flip_horizontal(m: Matrix) -> Matrix:
    return np.fliplr(m).copy()


def _bounding_box(m: Matrix):
    filled = np.argwhere(m == 1)
    if filled.size == 0:
        return None
    top, left = filled.min(axis=0)
    bottom, right = filled.max(axis=0)
    return int(top), int(bottom), int(left), int(right)


def trim_shape(m: Matrix) -> Matrix:
    """Trim to the bounding box of filled cells; nothing filled gives ``[[1]]``.

    Generated shapes are never empty, so falling back to a single filled
    block is safe for them.
    """
    if m is None or np.size(m) == 0:
        return np.ones((1, 1), dtype=np.int8)
    box = _bounding_box(np.asarray(m))
    if box is None:
        return np.ones((1, 1), dtype=np.int8)
    top, bottom, left, right = box
    return np.asarray(m, dtype=np.int8)[top : bottom + 1, left : right + 1].copy()


def trim_composition(m: Matrix) -> Matrix:
    """Trim a whole composed board; nothing filled gives ``[[0]]``."""
    if m is None or np.size(m) == 0:
        return np.zeros((1, 1), dtype=np.int8)
    box = _bounding_box(np.asarray(m))
    if box is None:
        return np.zeros((1, 1), dtype=np.int8)
    top, bottom, left, right = box
    return np.asarray(m, dtype=np.int8)[top : bottom + 1, left : right + 1].copy()


def orientations(m: Matrix) -> List[Matrix]:
    """All 8 rotation/flip variants.

    Index ``o`` is ``o // 2`` clockwise rotations, followed by a horizontal
    flip when ``o`` is odd. Index 0 is a copy of ``m``.
    """
    variants: List[Matrix] = []
    current = np.array(m, dtype=np.int8, copy=True)
    for _ in range(4):
        variants.append(current)
        variants.append(flip_horizontal(current))
        current = rotate_cw(current)
    return variants


def format_matrix(m: Matrix) -> str:
    return "\n".join("".join("█" if cell else "·" for cell in row) for row in m)
