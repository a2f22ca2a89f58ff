import numpy as np
import pytest

from shape_puzzle_rl.game.grid import OccupancyGrid
from shape_puzzle_rl.game.matrix import as_matrix
from shape_puzzle_rl.game.placement import can_place, commit, preview, projected_cells


def test_grid_starts_empty_with_fixed_size():
    grid = OccupancyGrid(4, 3)
    assert (grid.width, grid.height) == (4, 3)
    assert grid.grid.shape == (3, 4)
    assert grid.occupied_count() == 0


def test_grid_rejects_non_positive_size():
    with pytest.raises(ValueError):
        OccupancyGrid(0, 5)


def test_occupancy_and_handles():
    grid = OccupancyGrid(3, 3)
    grid.set_occupied(2, 1, handle="block-a")
    assert grid.is_occupied(2, 1)
    assert not grid.is_occupied(1, 2)
    assert grid.handle_at(2, 1) == "block-a"
    assert grid.clear_occupied(2, 1) == "block-a"
    assert not grid.is_occupied(2, 1)
    assert grid.clear_occupied(2, 1) is None


def test_out_of_bounds_is_not_occupied():
    grid = OccupancyGrid(2, 2)
    grid.grid.fill(1)
    assert not grid.is_occupied(-1, 0)
    assert not grid.is_occupied(0, 2)


def test_clone_state_is_a_copy():
    grid = OccupancyGrid(2, 2)
    snapshot = grid.clone_state()
    grid.set_occupied(0, 0)
    assert snapshot[0, 0] == 0


def test_projected_cells():
    m = as_matrix([[0, 1], [1, 1]])
    assert projected_cells(m, 3, -1) == [(4, -1), (3, 0), (4, 0)]


def test_single_cell_on_empty_grid():
    grid = OccupancyGrid(5, 5)
    single = as_matrix([[1]])
    for row in range(5):
        for col in range(5):
            assert can_place(grid, projected_cells(single, col, row))
    for col, row in [(-1, 0), (0, -1), (5, 0), (0, 5), (5, 5), (-1, -1)]:
        assert not can_place(grid, projected_cells(single, col, row))


def test_empty_cell_set_is_placeable():
    grid = OccupancyGrid(1, 1)
    grid.set_occupied(0, 0)
    assert can_place(grid, [])


def test_commit_writes_only_legal_placements():
    grid = OccupancyGrid(4, 4)
    cells = projected_cells(as_matrix([[1, 1, 1, 1]]), 0, 0)
    assert commit(grid, cells, handles={(0, 0): "h0"})
    assert grid.grid[0].tolist() == [1, 1, 1, 1]
    assert grid.handle_at(0, 0) == "h0"

    before = grid.clone_state()
    overlapping = projected_cells(as_matrix([[1], [1]]), 2, 0)
    assert not commit(grid, overlapping)
    np.testing.assert_array_equal(grid.grid, before)

    off_grid = projected_cells(as_matrix([[1, 1]]), 3, 2)
    assert not commit(grid, off_grid)
    np.testing.assert_array_equal(grid.grid, before)


def test_preview_does_not_mutate():
    grid = OccupancyGrid(3, 3)
    grid.set_occupied(1, 1)
    m = as_matrix([[1, 1]])
    bad = preview(grid, m, 0, 1)
    assert not bad.legal
    assert bad.cells == [(0, 1), (1, 1)]
    partly_off = preview(grid, m, 2, 0)
    assert not partly_off.legal
    assert partly_off.cells == [(2, 0)]
    good = preview(grid, m, 0, 0)
    assert good.legal
    assert grid.occupied_count() == 1


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (3, 0), (0, 3)])
def test_off_grid_writes_raise_instead_of_wrapping(x, y):
    grid = OccupancyGrid(3, 3)
    with pytest.raises(IndexError):
        grid.set_occupied(x, y)
    with pytest.raises(IndexError):
        grid.clear_occupied(x, y)
    assert grid.occupied_count() == 0
