"""
Plain-text views of a grid and of a compatibility model.
"""

from ..core.compatibility import CompatibilityModel
from ..core.grid import Grid
from ..core.tiles import SIDES, TILE_SIDE, TileCatalogue


def format_compatibility_table(model: CompatibilityModel) -> str:
    """
    Dump the compatibility table, one block per tile.

    Bitsets are printed highest tile index first, e.g. '1110' means tiles
    1, 2 and 3 (0-based) are compatible.
    """
    width = model.tile_count
    lines = []
    for tile, sides in enumerate(model.rows()):
        lines.append(f"Master tile: {tile}")
        for side in SIDES:
            lines.append(f"\tSide: {side.label} compatible: {sides[side]:0{width}b}")
    return '\n'.join(lines)


def render_text(grid: Grid, catalogue: TileCatalogue, filled: str = '#', empty: str = '.') -> str:
    """
    Draw the grid with each tile as 3x3 characters.

    Undecided cells are drawn as '?' and contradicted cells as '!'.
    """
    lines = []
    for row in range(grid.height):
        text_rows = [[] for _ in range(TILE_SIDE)]
        for col in range(grid.width):
            tile_index = grid.tile_at(col, row)
            if tile_index is None:
                mark = '!' if grid.is_contradicted(col, row) else '?'
                for sub_row in text_rows:
                    sub_row.append(mark * TILE_SIDE)
                continue
            pattern = catalogue[tile_index].rows
            for r in range(TILE_SIDE):
                text_rows[r].append(pattern[r].replace('x', filled).replace('_', empty))
        lines.extend(''.join(parts) for parts in text_rows)
    return '\n'.join(lines)
