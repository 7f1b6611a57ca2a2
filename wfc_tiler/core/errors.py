"""
Exception types raised by the tiling core.
"""


class TilerError(Exception):
    """Base class for all tiler errors."""


class InvalidCatalogue(TilerError, ValueError):
    """The tile catalogue cannot be used to build a compatibility model."""

    def __init__(self, message: str, tile: int = None, side=None):
        super().__init__(message)
        self.tile = tile
        self.side = side


class IndexOutOfBounds(TilerError, IndexError):
    """Grid coordinates outside [0, width) x [0, height)."""

    def __init__(self, col: int, row: int, width: int, height: int):
        super().__init__(
            f"Cell ({col}, {row}) is outside the {width}x{height} grid"
        )
        self.col = col
        self.row = row
