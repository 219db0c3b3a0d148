from __future__ import annotations

import numpy as np
import pytest

from falling_blocks.game import CellColor, GameGrid, PieceDoesNotFit


@pytest.fixture
def grid() -> GameGrid:
    return GameGrid(10, 20)


def test_new_grid_is_empty(grid):
    assert grid.grid.shape == (20, 10)
    assert grid.filled_count() == 0
    assert grid.full_rows().size == 0
    assert grid.clear_full_rows() == 0


@pytest.mark.parametrize(
    "cells, expected",
    [
        ([(0, 0), (9, 19)], True),
        ([(-1, 5)], False),
        ([(10, 5)], False),
        ([(3, 20)], False),
        ([(3, -1), (3, -4)], True),
        ([(-1, -1)], False),
        ([(10, -2)], False),
    ],
)
def test_fits_bounds(grid, cells, expected):
    assert grid.fits(cells) is expected


def test_fits_checks_occupancy_without_side_effects(grid):
    grid.grid[5, 3] = CellColor.RED
    before = grid.clone_state()
    assert not grid.fits([(3, 5)])
    assert not grid.fits([(3, 5)])
    assert grid.fits([(4, 5), (3, 4)])
    np.testing.assert_array_equal(grid.grid, before)


def test_lock_writes_color_and_drops_cells_above_top(grid):
    result = grid.lock([(4, -1), (4, 0), (5, 0)], CellColor.GREEN)
    assert result.cells_above_top == 1
    assert result.rows_cleared == 0
    assert grid.grid[0, 4] == CellColor.GREEN
    assert grid.grid[0, 5] == CellColor.GREEN
    assert grid.filled_count() == 2


def test_lock_rejects_overlap(grid):
    grid.grid[0, 4] = CellColor.RED
    before = grid.clone_state()
    with pytest.raises(PieceDoesNotFit):
        grid.lock([(4, 0), (5, 0)], CellColor.GREEN)
    np.testing.assert_array_equal(grid.grid, before)


def test_single_full_row_shifts_rows_above_down(grid):
    grid.grid[19, :] = CellColor.RED
    grid.grid[18, [0, 2, 4]] = CellColor.GREEN
    grid.grid[17, [9]] = CellColor.PURPLE
    assert list(grid.full_rows()) == [19]

    assert grid.clear_full_rows() == 1

    expected = np.zeros((20, 10), dtype=np.int8)
    expected[19, [0, 2, 4]] = CellColor.GREEN
    expected[18, [9]] = CellColor.PURPLE
    np.testing.assert_array_equal(grid.grid, expected)


def test_non_adjacent_full_rows_keep_survivor_order(grid):
    grid.grid[19, :] = CellColor.RED
    grid.grid[18, [1]] = CellColor.GREEN
    grid.grid[17, :] = CellColor.ORANGE
    grid.grid[16, [2]] = CellColor.YELLOW

    filled_before = grid.filled_count()
    assert grid.clear_full_rows() == 2

    assert grid.filled_count() == filled_before - 10 * 2
    assert grid.grid[19, 1] == CellColor.GREEN
    assert grid.grid[18, 2] == CellColor.YELLOW
    assert not grid.grid[:18].any()
    assert grid.grid.shape == (20, 10)


def test_lock_completing_row_clears_it(grid):
    grid.grid[19, :8] = CellColor.RED
    result = grid.lock([(8, 19), (9, 19), (8, 18), (9, 18)], CellColor.YELLOW)
    assert result.rows_cleared == 1
    assert grid.filled_count() == 2
    assert grid.grid[19, 8] == CellColor.YELLOW
    assert grid.grid[19, 9] == CellColor.YELLOW


def test_clear_without_full_rows_keeps_board(grid):
    grid.grid[19, :9] = CellColor.RED
    grid.grid[10, 3] = CellColor.PURPLE
    before = grid.clone_state()
    assert grid.full_rows().size == 0
    assert grid.clear_full_rows() == 0
    np.testing.assert_array_equal(grid.grid, before)
