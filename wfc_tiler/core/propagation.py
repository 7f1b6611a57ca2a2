"""
Constraint propagation across the grid.

After a cell's candidates shrink, each neighbour is intersected with the
union of what the cell's remaining tiles allow on the shared side. Changed
neighbours are queued in turn until nothing changes or a cell runs out of
candidates.
"""

from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, Union

from .compatibility import CompatibilityModel
from .grid import Grid
from ..logging_config import get_logger


logger = get_logger(__name__)

Position = Tuple[int, int]


@dataclass
class PropagationResult:
    """Outcome of one propagation pass."""
    updated: int = 0                              # number of candidate-set reductions
    contradiction: Optional[Position] = None      # cell left with no candidates

    @property
    def ok(self) -> bool:
        return self.contradiction is None


def propagate(
    grid: Grid,
    model: CompatibilityModel,
    seed: Union[Position, Iterable[Position]],
    on_update: Optional[Callable[[int, int], None]] = None
) -> PropagationResult:
    """
    Propagate constraints outward from the seed cell(s) to a fixed point.

    Args:
        grid: Grid to reduce in place
        model: Compatibility table
        seed: A (col, row) pair (tuple or list) or an iterable of them
        on_update: Called with (col, row) whenever a cell's candidates shrink

    Returns:
        PropagationResult; `contradiction` is set if a cell became empty
    """
    if isinstance(seed, (tuple, list)) and len(seed) == 2 and all(isinstance(v, int) for v in seed):
        seeds = [tuple(seed)]
    else:
        seeds = list(seed)

    queue = deque()
    for col, row in seeds:
        grid.at(col, row)  # bounds check
        queue.append((col, row))

    result = PropagationResult()

    while queue:
        col, row = queue.popleft()
        candidates = grid.at(col, row)

        for nx, ny, side in grid.neighbors(col, row):
            current = grid.at(nx, ny)
            reduced = current & model.allowed(candidates, side)
            if reduced == current:
                continue

            grid.set(nx, ny, reduced)
            result.updated += 1
            if on_update is not None:
                on_update(nx, ny)

            if reduced == 0:
                logger.debug(f"Contradiction at ({nx},{ny}) propagating from ({col},{row})")
                result.contradiction = (nx, ny)
                return result

            queue.append((nx, ny))

    return result


def propagate_all(
    grid: Grid,
    model: CompatibilityModel,
    on_update: Optional[Callable[[int, int], None]] = None
) -> PropagationResult:
    """Propagate from every cell; a no-op on a grid already at a fixed point."""
    return propagate(grid, model, list(grid.positions()), on_update)
