"""Tests for wfc_tiler.core.compatibility module."""

import pytest

from wfc_tiler.core import (
    CompatibilityModel,
    InvalidCatalogue,
    SIDES,
    Side,
    Tile,
    TileCatalogue,
    build_compatibility_model,
)


T1, T2, T3, T4 = range(4)


class TestBuild:
    """Tests for build_compatibility_model."""

    def test_table_for_default_catalogue(self, model: CompatibilityModel):
        """Test every entry of the built-in table."""
        expected = {
            Side.TOP: [0b1110, 0b0001, 0b0001, 0b1110],
            Side.BOTTOM: [0b0110, 0b1001, 0b1001, 0b1001],
            Side.LEFT: [0b1011, 0b1011, 0b1011, 0b0100],
            Side.RIGHT: [0b0111, 0b0111, 0b1000, 0b0111],
        }
        for side, masks in expected.items():
            for tile, mask in enumerate(masks):
                assert model.mask(tile, side) == mask

    def test_known_pairs(self, model: CompatibilityModel):
        assert model.compatible(T1, T2, Side.TOP)
        assert model.compatible(T1, T2, Side.BOTTOM)
        assert not model.compatible(T2, T3, Side.LEFT)
        assert model.compatible(T2, T3, Side.RIGHT)

    def test_symmetry(self, model: CompatibilityModel):
        """Test B is allowed across S of A iff A is allowed across opposite(S) of B."""
        for a in range(model.tile_count):
            for b in range(model.tile_count):
                for side in SIDES:
                    assert model.compatible(a, b, side) == model.compatible(b, a, side.opposite)

    def test_no_empty_entries(self, model: CompatibilityModel):
        for tile in range(model.tile_count):
            for side in SIDES:
                assert model.mask(tile, side) != 0

    def test_self_incompatible_tile_rejected(self):
        """Test a lone tile that cannot touch itself makes the catalogue unusable."""
        catalogue = TileCatalogue([Tile.from_bits('000000010', name='Spike')])
        with pytest.raises(InvalidCatalogue) as exc_info:
            build_compatibility_model(catalogue)
        assert exc_info.value.tile == 0
        assert exc_info.value.side == Side.TOP
        assert 'Spike' in str(exc_info.value)

    def test_blank_tile_is_self_compatible(self):
        model = build_compatibility_model(TileCatalogue([Tile(code=0)]))
        assert model.full_mask == 0b1
        for side in SIDES:
            assert model.mask(0, side) == 0b1

    def test_catalogue_is_kept(self, catalogue: TileCatalogue, model: CompatibilityModel):
        assert model.catalogue is catalogue
        assert model.tile_count == 4
        assert model.full_mask == 0b1111


class TestQueries:
    """Tests for derived queries and the diagnostic view."""

    def test_allowed_is_union(self, model: CompatibilityModel):
        """Test allowed() unions the entries of every candidate."""
        candidates = (1 << T3) | (1 << T4)
        assert model.allowed(candidates, Side.RIGHT) == 0b1000 | 0b0111
        assert model.allowed(1 << T3, Side.RIGHT) == 1 << T4
        assert model.allowed(0, Side.RIGHT) == 0

    def test_compatible_indices(self, model: CompatibilityModel):
        assert model.compatible_indices(T1, Side.RIGHT) == [T1, T2, T3]
        assert model.compatible_indices(T4, Side.LEFT) == [T3]

    def test_rows(self, model: CompatibilityModel):
        rows = model.rows()
        assert len(rows) == 4
        assert rows[T2][Side.TOP] == 0b0001
        assert set(rows[T2]) == set(SIDES)
