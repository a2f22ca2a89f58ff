import numpy as np
import pytest

from shape_puzzle_rl.game.matrix import (
    as_matrix,
    flip_horizontal,
    format_matrix,
    orientations,
    rotate_ccw,
    rotate_cw,
    trim_composition,
    trim_shape,
)


SAMPLES = [
    [[1]],
    [[1, 1, 1, 1]],
    [[1, 0, 0], [1, 1, 1]],
    [[0, 1, 1], [1, 1, 0], [0, 1, 0]],
    [[1, 0], [1, 1], [0, 1], [0, 1]],
]


def test_rotate_cw_mapping():
    m = as_matrix([[1, 2, 3], [4, 5, 6]])
    r = rotate_cw(m)
    assert r.shape == (3, 2)
    np.testing.assert_array_equal(r, [[4, 1], [5, 2], [6, 3]])


def test_rotate_ccw_mapping():
    m = as_matrix([[1, 2, 3], [4, 5, 6]])
    r = rotate_ccw(m)
    assert r.shape == (3, 2)
    np.testing.assert_array_equal(r, [[3, 6], [2, 5], [1, 4]])


def test_flip_reverses_rows():
    m = as_matrix([[1, 0, 0], [1, 1, 0]])
    np.testing.assert_array_equal(flip_horizontal(m), [[0, 0, 1], [0, 1, 1]])


@pytest.mark.parametrize("rows", SAMPLES)
def test_round_trips(rows):
    m = as_matrix(rows)
    four = rotate_cw(rotate_cw(rotate_cw(rotate_cw(m))))
    np.testing.assert_array_equal(four, m)
    np.testing.assert_array_equal(rotate_ccw(rotate_cw(m)), m)
    np.testing.assert_array_equal(rotate_cw(rotate_ccw(m)), m)
    np.testing.assert_array_equal(flip_horizontal(flip_horizontal(m)), m)


def test_transforms_do_not_mutate_input():
    m = as_matrix([[1, 0], [1, 1]])
    before = m.copy()
    rotated = rotate_cw(m)
    rotated[0, 0] = 0
    flipped = flip_horizontal(m)
    flipped[:] = 0
    np.testing.assert_array_equal(m, before)


def test_trim_shape_bounding_box():
    m = as_matrix([[0, 0, 0], [0, 1, 1], [0, 1, 0]])
    np.testing.assert_array_equal(trim_shape(m), [[1, 1], [1, 0]])


@pytest.mark.parametrize("rows", SAMPLES)
def test_trim_is_idempotent(rows):
    m = as_matrix(rows)
    once = trim_shape(m)
    np.testing.assert_array_equal(trim_shape(once), once)


def test_trim_fallbacks_differ():
    empty = np.zeros((3, 3), dtype=np.int8)
    np.testing.assert_array_equal(trim_shape(empty), [[1]])
    np.testing.assert_array_equal(trim_composition(empty), [[0]])
    np.testing.assert_array_equal(trim_shape(np.zeros((0, 0), dtype=np.int8)), [[1]])
    np.testing.assert_array_equal(trim_composition(np.zeros((0, 0), dtype=np.int8)), [[0]])


def test_trim_composition_keeps_inner_gaps():
    board = np.zeros((7, 7), dtype=np.int8)
    board[2, 1] = 1
    board[4, 3] = 1
    np.testing.assert_array_equal(trim_composition(board), [[1, 0, 0], [0, 0, 0], [0, 0, 1]])


def test_orientations_order():
    m = as_matrix([[1, 0, 0], [1, 1, 1]])
    variants = orientations(m)
    assert len(variants) == 8
    np.testing.assert_array_equal(variants[0], m)
    np.testing.assert_array_equal(variants[1], flip_horizontal(m))
    np.testing.assert_array_equal(variants[2], rotate_cw(m))
    np.testing.assert_array_equal(variants[7], flip_horizontal(rotate_ccw(m)))


def test_as_matrix_rejects_ragged_rows():
    with pytest.raises(AssertionError):
        as_matrix([[1, 1], [1]])
    with pytest.raises(AssertionError):
        as_matrix([])


def test_format_matrix():
    assert format_matrix(as_matrix([[1, 0], [0, 1]])) == "█·\n·█"
