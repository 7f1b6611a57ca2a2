"""
Export grid to PNG image.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtGui import QImage, QPainter, QColor

from ..core.grid import Grid
from ..core.tiles import TILE_SIDE, TileCatalogue


FILLED_COLOR = QColor(40, 40, 40)
EMPTY_COLOR = QColor(235, 235, 235)
UNDECIDED_COLOR = QColor(200, 200, 200)
CONTRADICTION_COLOR = QColor(255, 200, 200)


def render_grid_image(
    grid: Grid,
    catalogue: TileCatalogue,
    cell_size: int = 4,
    undecided_color: Optional[QColor] = None
) -> QImage:
    """
    Paint every resolved tile's 3x3 pattern into an image.

    Args:
        grid: Grid to draw
        catalogue: Catalogue holding the tile patterns
        cell_size: Pixel size of one sub-cell (a tile is 3 sub-cells wide)
        undecided_color: Fill for cells that are not resolved

    Returns:
        The rendered QImage
    """
    if cell_size < 1:
        raise ValueError("cell_size must be at least 1")

    if undecided_color is None:
        undecided_color = UNDECIDED_COLOR

    tile_px = cell_size * TILE_SIDE
    image = QImage(grid.width * tile_px, grid.height * tile_px, QImage.Format_RGB32)
    image.fill(undecided_color)

    painter = QPainter(image)
    for col, row in grid.positions():
        if grid.is_contradicted(col, row):
            painter.fillRect(col * tile_px, row * tile_px, tile_px, tile_px, CONTRADICTION_COLOR)
            continue

        tile_index = grid.tile_at(col, row)
        if tile_index is None:
            continue

        tile = catalogue[tile_index]
        for sub in range(TILE_SIDE * TILE_SIDE):
            color = FILLED_COLOR if tile.is_filled(sub) else EMPTY_COLOR
            x = col * tile_px + (sub % TILE_SIDE) * cell_size
            y = row * tile_px + (sub // TILE_SIDE) * cell_size
            painter.fillRect(x, y, cell_size, cell_size, color)
    painter.end()

    return image


def export_grid_to_png(
    filepath: str,
    grid: Grid,
    catalogue: TileCatalogue,
    cell_size: int = 4
) -> bool:
    """
    Export the current grid state to a PNG image.

    Returns:
        True if export successful, False otherwise
    """
    image = render_grid_image(grid, catalogue, cell_size)
    path = Path(filepath)
    return image.save(str(path), "PNG")
