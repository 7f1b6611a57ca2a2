"""
Grid of per-cell candidate sets.
"""

from typing import Iterator, List, Optional, Tuple

from .errors import IndexOutOfBounds
from .tiles import Side


# Neighbour offsets paired with the side of the current cell that faces them
DIRECTIONS = (
    (-1, 0, Side.LEFT),
    (1, 0, Side.RIGHT),
    (0, -1, Side.TOP),
    (0, 1, Side.BOTTOM),
)


def popcount(mask: int) -> int:
    return bin(mask).count('1')


def lowest_bit_index(mask: int) -> int:
    """Index of the lowest set bit (mask must be non-zero)."""
    return (mask & -mask).bit_length() - 1


def mask_indices(mask: int) -> List[int]:
    """Indices of all set bits, lowest first."""
    indices = []
    index = 0
    while mask:
        if mask & 1:
            indices.append(index)
        mask >>= 1
        index += 1
    return indices


class Grid:
    """
    Fixed-size width x height array of candidate masks, stored row-major.

    The grid is a passive store; it does not check compatibility.
    """

    def __init__(self, width: int, height: int, full_mask: int):
        if width < 1 or height < 1:
            raise ValueError(f"Grid size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.full_mask = full_mask
        self._cells: List[int] = [full_mask] * (width * height)

    def _offset(self, col: int, row: int) -> int:
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexOutOfBounds(col, row, self.width, self.height)
        return row * self.width + col

    def at(self, col: int, row: int) -> int:
        """Candidate mask of a cell."""
        return self._cells[self._offset(col, row)]

    def set(self, col: int, row: int, mask: int):
        self._cells[self._offset(col, row)] = mask

    def neighbors(self, col: int, row: int) -> List[Tuple[int, int, Side]]:
        """In-bounds neighbours with the side of (col, row) facing each one."""
        self._offset(col, row)
        result = []
        for dx, dy, side in DIRECTIONS:
            nx, ny = col + dx, row + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append((nx, ny, side))
        return result

    def positions(self) -> Iterator[Tuple[int, int]]:
        """All coordinates in row-major order."""
        for row in range(self.height):
            for col in range(self.width):
                yield col, row

    # --- Cell state ---

    def entropy(self, col: int, row: int) -> int:
        """Number of remaining candidates (lower = more constrained)."""
        return popcount(self.at(col, row))

    def is_resolved(self, col: int, row: int) -> bool:
        return self.entropy(col, row) == 1

    def is_contradicted(self, col: int, row: int) -> bool:
        return self.at(col, row) == 0

    def tile_at(self, col: int, row: int) -> Optional[int]:
        """Resolved tile index, or None if the cell is not resolved."""
        mask = self.at(col, row)
        if popcount(mask) != 1:
            return None
        return lowest_bit_index(mask)

    def is_solved(self) -> bool:
        return all(popcount(mask) == 1 for mask in self._cells)

    def find_contradiction(self) -> Optional[Tuple[int, int]]:
        """First contradicted cell in row-major order, if any."""
        for i, mask in enumerate(self._cells):
            if mask == 0:
                return i % self.width, i // self.width
        return None

    def resolved_count(self) -> int:
        return sum(1 for mask in self._cells if popcount(mask) == 1)

    def resolved_tiles(self) -> Tuple[Tuple[Optional[int], ...], ...]:
        """Read-only rows of resolved tile indices (None where undecided)."""
        return tuple(
            tuple(self.tile_at(col, row) for col in range(self.width))
            for row in range(self.height)
        )

    def masks(self) -> Tuple[int, ...]:
        """Snapshot of every candidate mask, row-major."""
        return tuple(self._cells)

    def copy(self) -> 'Grid':
        grid = Grid(self.width, self.height, self.full_mask)
        grid._cells = list(self._cells)
        return grid

    def __repr__(self):
        return f"Grid({self.width}x{self.height}, resolved={self.resolved_count()})"
