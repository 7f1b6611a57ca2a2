"""
Precomputed tile compatibility table.
"""

from typing import Dict, List, Tuple

from .errors import InvalidCatalogue
from .tiles import SIDES, Side, TileCatalogue, compatible
from ..logging_config import get_logger


logger = get_logger(__name__)


class CompatibilityModel:
    """
    Which tiles may be placed next to each tile, per side.

    `mask(tile, side)` is a bitmask over tile indices: bit j is set if tile j
    can sit in the neighbouring cell across `side` of `tile`. The table is
    built once and never mutated, so one model can serve any number of solves.
    """

    def __init__(self, catalogue: TileCatalogue, table: Tuple[Tuple[int, ...], ...]):
        self._catalogue = catalogue
        self._table = table

    @property
    def catalogue(self) -> TileCatalogue:
        return self._catalogue

    @property
    def tile_count(self) -> int:
        return len(self._table)

    @property
    def full_mask(self) -> int:
        return (1 << len(self._table)) - 1

    def mask(self, tile: int, side: Side) -> int:
        """Tiles allowed across `side` of `tile`."""
        return self._table[tile][side.value]

    def compatible(self, a: int, b: int, side: Side) -> bool:
        """Check if tile `b` can be placed on `side` of tile `a`."""
        return bool(self.mask(a, side) & (1 << b))

    def allowed(self, candidates: int, side: Side) -> int:
        """Union of the masks of every tile still in `candidates`."""
        result = 0
        tile = 0
        while candidates:
            if candidates & 1:
                result |= self._table[tile][side.value]
            candidates >>= 1
            tile += 1
        return result

    # --- Diagnostics ---

    def compatible_indices(self, tile: int, side: Side) -> List[int]:
        """Indices of the tiles allowed across `side` of `tile`."""
        mask = self.mask(tile, side)
        return [i for i in range(self.tile_count) if mask & (1 << i)]

    def rows(self) -> List[Dict[Side, int]]:
        """Per-tile mapping of side to compatibility mask."""
        return [
            {side: self._table[tile][side.value] for side in SIDES}
            for tile in range(self.tile_count)
        ]


def build_compatibility_model(catalogue: TileCatalogue) -> CompatibilityModel:
    """
    Build the compatibility table for a catalogue.

    Args:
        catalogue: The tiles to relate

    Returns:
        The immutable CompatibilityModel

    Raises:
        InvalidCatalogue: If some tile has no compatible neighbour on some side
    """
    table = []
    for index, tile in enumerate(catalogue):
        sides = [0] * len(SIDES)
        for side in SIDES:
            mask = 0
            for other_index, other in enumerate(catalogue):
                if compatible(tile, other, side):
                    mask |= 1 << other_index
            if mask == 0:
                raise InvalidCatalogue(
                    f"Tile '{catalogue.name_of(index)}' has no compatible tile on side {side.label}",
                    tile=index, side=side
                )
            sides[side.value] = mask
        table.append(tuple(sides))

    logger.debug(f"Built compatibility model for {len(catalogue)} tiles")
    return CompatibilityModel(catalogue, tuple(table))
