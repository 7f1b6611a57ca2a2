"""Tests for wfc_tiler.core.grid module."""

import pytest

from wfc_tiler.core import Grid, IndexOutOfBounds, Side
from wfc_tiler.core.grid import lowest_bit_index, mask_indices, popcount


class TestMaskHelpers:

    def test_popcount(self):
        assert popcount(0) == 0
        assert popcount(0b1011) == 3

    def test_lowest_bit_index(self):
        assert lowest_bit_index(0b1000) == 3
        assert lowest_bit_index(0b0110) == 1

    def test_mask_indices(self):
        assert mask_indices(0b1010) == [1, 3]
        assert mask_indices(0) == []


class TestGrid:
    """Tests for Grid storage and access."""

    def test_initial_state(self):
        """Test every cell starts with the full candidate set."""
        grid = Grid(3, 2, 0b1111)
        assert all(mask == 0b1111 for mask in grid.masks())
        assert grid.entropy(2, 1) == 4
        assert not grid.is_solved()
        assert grid.resolved_count() == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Grid(0, 3, 0b1)

    def test_set_and_at(self):
        grid = Grid(2, 2, 0b1111)
        grid.set(1, 0, 0b0100)
        assert grid.at(1, 0) == 0b0100
        assert grid.masks()[1] == 0b0100
        assert grid.is_resolved(1, 0)
        assert grid.tile_at(1, 0) == 2
        assert grid.tile_at(0, 0) is None

    @pytest.mark.parametrize("col,row", [(-1, 0), (2, 0), (0, 2), (0, -1)])
    def test_out_of_bounds(self, col, row):
        """Test access outside the grid raises IndexOutOfBounds."""
        grid = Grid(2, 2, 0b1)
        with pytest.raises(IndexOutOfBounds):
            grid.at(col, row)
        with pytest.raises(IndexError):
            grid.set(col, row, 0)

    def test_neighbors_interior(self):
        """Test neighbours come with the side of the current cell facing them."""
        grid = Grid(3, 3, 0b1)
        assert grid.neighbors(1, 1) == [
            (0, 1, Side.LEFT),
            (2, 1, Side.RIGHT),
            (1, 0, Side.TOP),
            (1, 2, Side.BOTTOM),
        ]

    def test_neighbors_corner(self):
        """Test out-of-bounds neighbours are omitted."""
        grid = Grid(3, 3, 0b1)
        assert grid.neighbors(0, 0) == [(1, 0, Side.RIGHT), (0, 1, Side.BOTTOM)]
        assert grid.neighbors(2, 2) == [(1, 2, Side.LEFT), (2, 1, Side.TOP)]

    def test_neighbors_single_cell(self):
        assert Grid(1, 1, 0b1).neighbors(0, 0) == []

    def test_neighbors_out_of_bounds(self):
        with pytest.raises(IndexOutOfBounds):
            Grid(2, 2, 0b1).neighbors(2, 2)

    def test_positions_row_major(self):
        grid = Grid(2, 2, 0b1)
        assert list(grid.positions()) == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_contradiction(self):
        grid = Grid(2, 2, 0b11)
        assert grid.find_contradiction() is None
        grid.set(1, 1, 0)
        assert grid.is_contradicted(1, 1)
        assert grid.find_contradiction() == (1, 1)
        assert grid.tile_at(1, 1) is None

    def test_solved_and_resolved_tiles(self):
        grid = Grid(2, 1, 0b11)
        grid.set(0, 0, 0b01)
        grid.set(1, 0, 0b10)
        assert grid.is_solved()
        assert grid.resolved_tiles() == ((0, 1),)

    def test_copy_is_independent(self):
        grid = Grid(2, 1, 0b11)
        clone = grid.copy()
        clone.set(0, 0, 0b01)
        assert grid.at(0, 0) == 0b11
        assert clone.at(0, 0) == 0b01
