"""
Tile patterns, sides and edge extraction.

A tile is a 3x3 pattern of filled/empty sub-cells stored as a 9-bit mask.
Sub-cells are numbered row-major:

    0 1 2
    3 4 5
    6 7 8
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidCatalogue


TILE_SIDE = 3
TILE_CELLS = TILE_SIDE * TILE_SIDE
FULL_PATTERN = (1 << TILE_CELLS) - 1

# Width of the compatibility mask; a catalogue may not hold more tiles.
MAX_TILES = 8

FILLED_CHARS = frozenset('x#1X')
EMPTY_CHARS = frozenset('_.0 ')


class Side(Enum):
    """One of the four grid-adjacency directions."""
    TOP = 0
    BOTTOM = 1
    LEFT = 2
    RIGHT = 3

    @property
    def opposite(self) -> 'Side':
        return _OPPOSITES[self]

    @property
    def label(self) -> str:
        return self.name.capitalize()


SIDES = (Side.TOP, Side.BOTTOM, Side.LEFT, Side.RIGHT)

_OPPOSITES = {
    Side.TOP: Side.BOTTOM,
    Side.BOTTOM: Side.TOP,
    Side.LEFT: Side.RIGHT,
    Side.RIGHT: Side.LEFT,
}

# Top/Bottom read left-to-right, Left/Right read top-to-bottom
_EDGE_INDICES = {
    Side.TOP: (0, 1, 2),
    Side.BOTTOM: (6, 7, 8),
    Side.LEFT: (0, 3, 6),
    Side.RIGHT: (2, 5, 8),
}


def get_opposite_side(side: Side) -> Side:
    """Get the side facing `side` across a shared edge."""
    return _check_side(side).opposite


def indices_for_side(side: Side) -> Tuple[int, int, int]:
    """Sub-cell positions along the given edge of the 3x3 pattern."""
    return _EDGE_INDICES[_check_side(side)]


def _check_side(side) -> Side:
    if not isinstance(side, Side):
        raise TypeError(f"Expected a Side, got {side!r}")
    return side


@dataclass(frozen=True)
class Tile:
    """An immutable 3x3 fill pattern."""
    code: int                         # 9-bit mask, bit i set if sub-cell i is filled
    name: str = ''
    weight: float = 1.0               # relative weight for weighted-random selection

    def __post_init__(self):
        if not isinstance(self.code, int) or not 0 <= self.code <= FULL_PATTERN:
            raise InvalidCatalogue(f"Tile pattern {self.code!r} is not a 9-bit mask")
        if isinstance(self.weight, bool) or not isinstance(self.weight, (int, float)):
            raise InvalidCatalogue(f"Tile '{self.name}' weight {self.weight!r} is not a number")
        if self.weight <= 0:
            raise InvalidCatalogue(f"Tile '{self.name}' must have a positive weight")

    def is_filled(self, index: int) -> bool:
        return bool(self.code & (1 << index))

    @property
    def rows(self) -> List[str]:
        """The pattern as three strings of 'x' (filled) and '_' (empty)."""
        return [
            ''.join('x' if self.is_filled(r * TILE_SIDE + c) else '_'
                    for c in range(TILE_SIDE))
            for r in range(TILE_SIDE)
        ]

    @property
    def bits(self) -> str:
        """Binary literal with sub-cell 8 first, e.g. '000000010'."""
        return format(self.code, f'0{TILE_CELLS}b')

    @classmethod
    def from_rows(cls, rows: Sequence[str], name: str = '', weight: float = 1.0) -> 'Tile':
        """Build a tile from three rows such as ['_x_', '___', '___']."""
        if len(rows) != TILE_SIDE or any(len(r) != TILE_SIDE for r in rows):
            raise InvalidCatalogue(f"Tile '{name}' must have {TILE_SIDE} rows of {TILE_SIDE} cells")
        code = 0
        for r, row in enumerate(rows):
            for c, ch in enumerate(row):
                if ch in FILLED_CHARS:
                    code |= 1 << (r * TILE_SIDE + c)
                elif ch not in EMPTY_CHARS:
                    raise InvalidCatalogue(f"Tile '{name}' has unknown cell character {ch!r}")
        return cls(code=code, name=name, weight=weight)

    @classmethod
    def from_bits(cls, bits: str, name: str = '', weight: float = 1.0) -> 'Tile':
        """Build a tile from a binary literal like '0b010110000' or '010110000'."""
        text = bits[2:] if bits.lower().startswith('0b') else bits
        if not text or len(text) > TILE_CELLS or set(text) - {'0', '1'}:
            raise InvalidCatalogue(f"Tile '{name}' has an invalid bit pattern {bits!r}")
        return cls(code=int(text, 2), name=name, weight=weight)


def extract_edge(tile: Tile, side: Side) -> Tuple[bool, bool, bool]:
    """Filled/empty flags along one edge of a tile."""
    return tuple(tile.is_filled(i) for i in indices_for_side(side))


def compatible(a: Tile, b: Tile, side: Side) -> bool:
    """Check if `b` can be placed on `side` of `a`."""
    return extract_edge(a, side) == extract_edge(b, get_opposite_side(side))


class TileCatalogue:
    """Ordered, fixed list of tiles. A tile's position is its index."""

    def __init__(self, tiles: Iterable[Tile]):
        self._tiles: Tuple[Tile, ...] = tuple(tiles)
        if not self._tiles:
            raise InvalidCatalogue("Catalogue has no tiles")
        if len(self._tiles) > MAX_TILES:
            raise InvalidCatalogue(
                f"Catalogue has {len(self._tiles)} tiles, at most {MAX_TILES} are supported"
            )

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __getitem__(self, index: int) -> Tile:
        return self._tiles[index]

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        return self._tiles

    @property
    def full_mask(self) -> int:
        """Mask with a bit set for every tile index."""
        return (1 << len(self._tiles)) - 1

    def name_of(self, index: int) -> str:
        """Display name of a tile, falling back to 'TileN' (1-based)."""
        return self._tiles[index].name or f"Tile{index + 1}"

    def index_of(self, name: str) -> Optional[int]:
        for index in range(len(self._tiles)):
            if self.name_of(index) == name:
                return index
        return None

    def weights(self) -> List[float]:
        return [t.weight for t in self._tiles]


# _x_      ___      ___      _x_
# ___      ___      _xx      xx_
# ___      _x_      _x_      _x_
DEFAULT_CATALOGUE = TileCatalogue([
    Tile.from_bits('000000010', name='Tile1'),
    Tile.from_bits('010000000', name='Tile2'),
    Tile.from_bits('010110000', name='Tile3'),
    Tile.from_bits('010011010', name='Tile4'),
])
