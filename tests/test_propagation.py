"""Tests for wfc_tiler.core.propagation module."""

import pytest

from wfc_tiler.core import (
    CompatibilityModel,
    Grid,
    IndexOutOfBounds,
    RandomPolicy,
    Side,
    propagate,
    propagate_all,
)


T1, T2, T3, T4 = range(4)


def bit(tile: int) -> int:
    return 1 << tile


@pytest.fixture
def row_grid(model: CompatibilityModel) -> Grid:
    """A 3x1 grid with every tile still possible."""
    return Grid(3, 1, model.full_mask)


class TestPropagate:
    """Tests for single-seed and multi-seed propagation."""

    def test_single_neighbour_reduced(self, model: CompatibilityModel):
        """Test a locked Tile3 leaves only Tile4 to its right."""
        grid = Grid(2, 1, model.full_mask)
        grid.set(0, 0, bit(T3))
        result = propagate(grid, model, (0, 0))
        assert result.ok
        assert grid.at(1, 0) == bit(T4)

    def test_tile1_right_neighbour(self, model: CompatibilityModel):
        """Test the neighbour of Tile1 keeps exactly the tiles allowed on its right."""
        grid = Grid(2, 1, model.full_mask)
        grid.set(0, 0, bit(T1))
        propagate(grid, model, (0, 0))
        assert grid.at(1, 0) == bit(T1) | bit(T2) | bit(T3)

    def test_reduction_travels_across_grid(self, model: CompatibilityModel, row_grid: Grid):
        """Test a change two cells away is reached through the queue."""
        row_grid.set(0, 0, bit(T3))
        result = propagate(row_grid, model, (0, 0))
        assert result.ok
        assert row_grid.at(1, 0) == bit(T4)
        assert row_grid.at(2, 0) == model.mask(T4, Side.RIGHT)

    def test_contradiction_reported(self, model: CompatibilityModel, row_grid: Grid):
        """Test conflicting constraints empty the middle cell and stop."""
        row_grid.set(0, 0, bit(T3))
        row_grid.set(2, 0, bit(T4))
        result = propagate(row_grid, model, [(0, 0), (2, 0)])
        assert not result.ok
        assert result.contradiction == (1, 0)
        assert row_grid.at(1, 0) == 0

    def test_unconstrained_seed_changes_nothing(self, model: CompatibilityModel, row_grid: Grid):
        result = propagate(row_grid, model, (1, 0))
        assert result.ok
        assert result.updated == 0
        assert all(mask == model.full_mask for mask in row_grid.masks())

    def test_on_update_called_per_reduction(self, model: CompatibilityModel, row_grid: Grid):
        updates = []
        row_grid.set(0, 0, bit(T3))
        result = propagate(row_grid, model, (0, 0), on_update=lambda c, r: updates.append((c, r)))
        assert updates == [(1, 0), (2, 0)]
        assert result.updated == 2

    def test_seed_out_of_bounds(self, model: CompatibilityModel, row_grid: Grid):
        with pytest.raises(IndexOutOfBounds):
            propagate(row_grid, model, (3, 0))

    def test_list_position_as_single_seed(self, model: CompatibilityModel):
        grid = Grid(2, 1, model.full_mask)
        grid.set(0, 0, bit(T3))
        assert propagate(grid, model, [0, 0]).ok
        assert grid.at(1, 0) == bit(T4)


class TestFixedPoint:
    """Tests for monotonicity and idempotence."""

    def test_candidates_only_shrink(self, model: CompatibilityModel):
        """Test every reported update is a strict subset of the previous set."""
        grid = Grid(5, 5, model.full_mask)
        previous = list(grid.masks())
        policy = RandomPolicy(seed=3)

        def check(col, row):
            index = row * grid.width + col
            new = grid.at(col, row)
            assert new & ~previous[index] == 0
            assert new != previous[index]
            previous[index] = new

        for col, row in [(0, 0), (4, 4), (2, 1), (1, 3)]:
            mask = grid.at(col, row)
            if mask == 0:
                break
            grid.set(col, row, 1 << policy(mask))
            previous[row * grid.width + col] = grid.at(col, row)
            if not propagate(grid, model, (col, row), on_update=check).ok:
                break

    def test_propagate_all_is_idempotent(self, model: CompatibilityModel):
        """Test a settled grid is left untouched by another full pass."""
        grid = Grid(4, 3, model.full_mask)
        grid.set(1, 1, bit(T3))
        assert propagate(grid, model, (1, 1)).ok
        settled = grid.masks()

        result = propagate_all(grid, model)
        assert result.ok
        assert result.updated == 0
        assert grid.masks() == settled

    def test_fixed_point_independent_of_seed_order(self, model: CompatibilityModel):
        """Test seeding in a different order reaches the same fixed point."""
        first = Grid(3, 1, model.full_mask)
        second = Grid(3, 1, model.full_mask)
        for grid in (first, second):
            grid.set(0, 0, bit(T1))
            grid.set(2, 0, bit(T3))

        assert propagate(first, model, [(0, 0), (2, 0)]).ok
        assert propagate(second, model, [(2, 0), (0, 0)]).ok
        assert first.masks() == second.masks()
        assert first.at(1, 0) == bit(T1) | bit(T2)
