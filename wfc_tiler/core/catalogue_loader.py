"""
Load and save tile catalogue files (.json).
"""

import json
from pathlib import Path

from .errors import InvalidCatalogue
from .tiles import Tile, TileCatalogue


class CatalogueLoader:
    """Reader/writer for JSON tile catalogues."""

    @staticmethod
    def load(filepath: str) -> TileCatalogue:
        """
        Load a catalogue file.

        Each tile entry gives its pattern either as "rows" (three strings such
        as "_x_") or as "bits" (a binary literal, sub-cell 8 first).

        Raises:
            FileNotFoundError: If file doesn't exist
            InvalidCatalogue: If file format is invalid
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise InvalidCatalogue(f"Invalid catalogue file: {e}")

        if not isinstance(data, dict) or 'tiles' not in data:
            raise InvalidCatalogue("Invalid catalogue file: missing 'tiles'")

        return CatalogueLoader.from_dict(data)

    @staticmethod
    def from_dict(data: dict) -> TileCatalogue:
        tiles_data = data.get('tiles', [])
        if not isinstance(tiles_data, list):
            raise InvalidCatalogue("Invalid catalogue file: 'tiles' must be a list")

        tiles = []
        for i, tile_data in enumerate(tiles_data):
            if not isinstance(tile_data, dict):
                raise InvalidCatalogue(f"Invalid catalogue file: tile entry {i} is not an object")
            name = str(tile_data.get('name', f"Tile{i + 1}"))
            weight = tile_data.get('weight', 1.0)
            if 'rows' in tile_data:
                rows = tile_data['rows']
                if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
                    raise InvalidCatalogue(f"Tile '{name}' rows must be a list of strings")
                tiles.append(Tile.from_rows(rows, name=name, weight=weight))
            elif 'bits' in tile_data:
                tiles.append(Tile.from_bits(str(tile_data['bits']), name=name, weight=weight))
            else:
                raise InvalidCatalogue(f"Tile '{name}' has neither 'rows' nor 'bits'")
        return TileCatalogue(tiles)

    @staticmethod
    def to_dict(catalogue: TileCatalogue) -> dict:
        return {
            "version": "1.0",
            "tiles": [
                {
                    "name": catalogue.name_of(i),
                    "rows": tile.rows,
                    "weight": tile.weight
                }
                for i, tile in enumerate(catalogue)
            ]
        }

    @staticmethod
    def save(filepath: str, catalogue: TileCatalogue):
        """Write a catalogue file using the readable "rows" form."""
        path = Path(filepath)
        path.write_text(json.dumps(CatalogueLoader.to_dict(catalogue), indent=2), encoding='utf-8')
