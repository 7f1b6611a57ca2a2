from .errors import TilerError, InvalidCatalogue, IndexOutOfBounds
from .tiles import (
    Side, SIDES, Tile, TileCatalogue, DEFAULT_CATALOGUE, MAX_TILES,
    extract_edge, compatible, get_opposite_side
)
from .compatibility import CompatibilityModel, build_compatibility_model
from .grid import Grid
from .propagation import PropagationResult, propagate, propagate_all
from .collapse import (
    CollapseDriver, EngineState, Solved, Contradicted, StepLimitReached,
    LowestIndexPolicy, RandomPolicy, WeightedRandomPolicy, make_policy,
    solve, solve_with_retries
)
from .catalogue_loader import CatalogueLoader
from .map_saver import MapSaver, MapData

__all__ = [
    'TilerError', 'InvalidCatalogue', 'IndexOutOfBounds',
    'Side', 'SIDES', 'Tile', 'TileCatalogue', 'DEFAULT_CATALOGUE', 'MAX_TILES',
    'extract_edge', 'compatible', 'get_opposite_side',
    'CompatibilityModel', 'build_compatibility_model',
    'Grid',
    'PropagationResult', 'propagate', 'propagate_all',
    'CollapseDriver', 'EngineState', 'Solved', 'Contradicted', 'StepLimitReached',
    'LowestIndexPolicy', 'RandomPolicy', 'WeightedRandomPolicy', 'make_policy',
    'solve', 'solve_with_retries',
    'CatalogueLoader', 'MapSaver', 'MapData'
]
