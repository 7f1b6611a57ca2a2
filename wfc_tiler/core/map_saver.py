"""
Save and load generated tile maps (.json).
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .grid import Grid, mask_indices, popcount
from .tiles import TileCatalogue


@dataclass
class MapData:
    """A tile map read back from disk."""
    width: int
    height: int
    tile_names: List[str] = field(default_factory=list)
    rows: List[List[Optional[int]]] = field(default_factory=list)  # None if uncollapsed

    def is_complete(self) -> bool:
        return all(tile is not None for row in self.rows for tile in row)


class MapSaver:
    """Save and load tile map files."""

    @staticmethod
    def save(filepath: str, grid: Grid, catalogue: TileCatalogue):
        """
        Save grid state to a map file.

        Args:
            filepath: Output file path
            grid: Grid to save (resolved cells and remaining candidates)
            catalogue: Catalogue the grid's tile indices refer to
        """
        cells_data = []
        uncollapsed_data = []

        for col, row in grid.positions():
            mask = grid.at(col, row)
            if popcount(mask) == 1:
                cells_data.append({
                    "x": col,
                    "y": row,
                    "tile": grid.tile_at(col, row)
                })
            else:
                uncollapsed_data.append({
                    "x": col,
                    "y": row,
                    "candidates": mask_indices(mask)
                })

        map_json = {
            "version": "1.0",
            "grid": {
                "width": grid.width,
                "height": grid.height
            },
            "tiles": [catalogue.name_of(i) for i in range(len(catalogue))],
            "cells": cells_data,
            "uncollapsed": uncollapsed_data
        }

        Path(filepath).write_text(json.dumps(map_json, indent=2), encoding='utf-8')

    @staticmethod
    def load(filepath: str) -> MapData:
        """
        Load a map file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If file format is invalid
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
            width = data['grid']['width']
            height = data['grid']['height']
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid map file: {e}")
        except (KeyError, TypeError):
            raise ValueError("Invalid map file: missing grid size")

        if not isinstance(width, int) or not isinstance(height, int) or width < 1 or height < 1:
            raise ValueError(f"Invalid map file: bad grid size {width!r}x{height!r}")

        cells = data.get('cells', [])
        if not isinstance(cells, list):
            raise ValueError("Invalid map file: 'cells' must be a list")

        rows = [[None] * width for _ in range(height)]
        for cell in cells:
            try:
                x, y, tile = cell['x'], cell['y'], cell['tile']
            except (KeyError, TypeError):
                raise ValueError(f"Invalid map file: malformed cell {cell!r}")
            if not all(isinstance(v, int) for v in (x, y, tile)):
                raise ValueError(f"Invalid map file: malformed cell {cell!r}")
            if not (0 <= x < width and 0 <= y < height):
                raise ValueError(f"Invalid map file: cell ({x}, {y}) outside grid")
            rows[y][x] = tile

        return MapData(
            width=width,
            height=height,
            tile_names=data.get('tiles', []),
            rows=rows
        )
