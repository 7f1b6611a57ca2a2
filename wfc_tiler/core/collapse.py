"""
Wave Function Collapse driver.

Repeatedly collapses the most constrained undecided cell and propagates the
consequences until the grid is solved or a contradiction appears.
"""

import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from PySide6.QtCore import QObject, Signal

from .compatibility import CompatibilityModel
from .grid import Grid, lowest_bit_index, mask_indices, popcount
from .propagation import propagate
from ..logging_config import get_logger


logger = get_logger(__name__)

Position = Tuple[int, int]
TileSelectionPolicy = Callable[[int], int]


class EngineState(Enum):
    """Collapse driver states."""
    IDLE = auto()
    RUNNING = auto()
    SOLVED = auto()
    CONTRADICTED = auto()


TERMINAL_STATES = (EngineState.SOLVED, EngineState.CONTRADICTED)


# --- Tile selection policies ---

class LowestIndexPolicy:
    """Always pick the lowest remaining tile index. Fully reproducible."""

    deterministic = True

    def __call__(self, candidates: int) -> int:
        return lowest_bit_index(candidates)


class RandomPolicy:
    """Pick uniformly among the remaining tiles."""

    deterministic = False

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def __call__(self, candidates: int) -> int:
        return self._rng.choice(mask_indices(candidates))


class WeightedRandomPolicy(RandomPolicy):
    """Pick among the remaining tiles proportionally to their weights."""

    def __init__(self, weights: Sequence[float], seed: Optional[int] = None):
        super().__init__(seed)
        self.weights = list(weights)

    def __call__(self, candidates: int) -> int:
        indices = mask_indices(candidates)
        return self._rng.choices(indices, weights=[self.weights[i] for i in indices])[0]


POLICIES = ('lowest', 'random', 'weighted')


def make_policy(
    name: str,
    seed: Optional[int] = None,
    weights: Optional[Sequence[float]] = None
) -> TileSelectionPolicy:
    """Create a selection policy by name ('lowest', 'random' or 'weighted')."""
    if name == 'lowest':
        return LowestIndexPolicy()
    if name == 'random':
        return RandomPolicy(seed)
    if name == 'weighted':
        if weights is None:
            raise ValueError("Weighted policy needs tile weights")
        return WeightedRandomPolicy(weights, seed)
    raise ValueError(f"Unknown tile selection policy '{name}', expected one of {POLICIES}")


# --- Solve outcomes ---

@dataclass
class Solved:
    """Every cell holds exactly one tile."""
    grid: Grid
    steps: int = 0
    attempts: int = 1
    solved = True

    @property
    def tiles(self) -> Tuple[Tuple[int, ...], ...]:
        return self.grid.resolved_tiles()


@dataclass
class Contradicted:
    """Some cell ran out of candidates. Not an error: retry or report."""
    grid: Grid
    cell: Position
    steps: int = 0
    attempts: int = 1
    solved = False


@dataclass
class StepLimitReached:
    """The caller's step cap ran out before a terminal state."""
    grid: Grid
    steps: int = 0
    attempts: int = 1
    solved = False


SolveResult = Union[Solved, Contradicted, StepLimitReached]


class CollapseDriver(QObject):
    """
    Collapse loop over a single grid.

    Signals:
        cell_collapsed(col, row, tile): Emitted when a cell is collapsed or locked
        cell_updated(col, row): Emitted when propagation shrinks a cell
        contradiction_found(col, row): Emitted when a cell runs out of candidates
        state_changed(state): Emitted when the driver state changes
        finished(success): Emitted when a terminal state is reached
        progress_updated(resolved, total): Emitted after each step
    """

    cell_collapsed = Signal(int, int, int)
    cell_updated = Signal(int, int)
    contradiction_found = Signal(int, int)
    state_changed = Signal(object)
    finished = Signal(bool)
    progress_updated = Signal(int, int)

    def __init__(
        self,
        model: CompatibilityModel,
        width: int,
        height: int,
        policy: Optional[TileSelectionPolicy] = None,
        parent=None
    ):
        super().__init__(parent)

        self.model = model
        self.grid = Grid(width, height, model.full_mask)
        self.policy = policy or LowestIndexPolicy()
        self.steps = 0
        self.contradiction: Optional[Position] = None
        self.locked: Dict[Position, int] = {}

        self._state = EngineState.IDLE

    @property
    def state(self) -> EngineState:
        return self._state

    @state.setter
    def state(self, value: EngineState):
        if self._state != value:
            self._state = value
            self.state_changed.emit(value)

    @property
    def total_cells(self) -> int:
        return self.grid.width * self.grid.height

    def lock_cell(self, col: int, row: int, tile: int) -> bool:
        """
        Pin a cell to a specific tile and propagate from it.

        Returns:
            False if the tile was already ruled out or propagation contradicted
        """
        if self.state in TERMINAL_STATES:
            return False
        if not 0 <= tile < self.model.tile_count:
            raise ValueError(f"Tile index {tile} is not in the catalogue")

        current = self.grid.at(col, row)
        if not current & (1 << tile):
            logger.debug(f"Lock of tile {tile} at ({col},{row}) conflicts with candidates {current:b}")
            self.grid.set(col, row, 0)
            self.cell_updated.emit(col, row)
            self._contradict((col, row))
            return False

        self.grid.set(col, row, 1 << tile)
        self.locked[(col, row)] = tile
        self.cell_collapsed.emit(col, row, tile)
        return self._propagate_from(col, row)

    def reset(self):
        """Start over on a fresh grid, keeping locked cells."""
        locked_cells = dict(self.locked)

        self.grid = Grid(self.grid.width, self.grid.height, self.model.full_mask)
        self.steps = 0
        self.contradiction = None
        self.locked = {}
        self.state = EngineState.IDLE

        for (col, row), tile in locked_cells.items():
            if not self.lock_cell(col, row, tile):
                break

    def step(self) -> EngineState:
        """Perform one collapse iteration and return the resulting state."""
        if self.state in TERMINAL_STATES:
            return self.state

        self.state = EngineState.RUNNING

        if self._check_finished():
            return self.state

        contradiction = self.grid.find_contradiction()
        if contradiction is not None:
            self._contradict(contradiction)
            return self.state

        col, row = self._select_cell()
        candidates = self.grid.at(col, row)
        tile = self.policy(candidates)
        if not candidates & (1 << tile):
            raise ValueError(f"Selection policy chose tile {tile} outside candidates {candidates:b}")

        self.steps += 1
        self.grid.set(col, row, 1 << tile)
        logger.debug(f"Step {self.steps}: collapsed ({col},{row}) to tile {tile}")
        self.cell_collapsed.emit(col, row, tile)

        if self._propagate_from(col, row):
            self._check_finished()

        return self.state

    def run(self, max_steps: Optional[int] = None) -> SolveResult:
        """
        Step until the grid is solved or contradicted.

        Args:
            max_steps: Optional cap on collapse steps for this call
        """
        taken = 0
        while self.state not in TERMINAL_STATES:
            if max_steps is not None and taken >= max_steps:
                if self._check_finished():
                    break
                logger.debug(f"Step limit {max_steps} reached")
                return StepLimitReached(grid=self.grid, steps=self.steps)
            self.step()
            taken += 1
        return self.result()

    def result(self) -> SolveResult:
        """Current outcome of the driver."""
        if self.state == EngineState.SOLVED:
            return Solved(grid=self.grid, steps=self.steps)
        if self.state == EngineState.CONTRADICTED:
            return Contradicted(grid=self.grid, cell=self.contradiction, steps=self.steps)
        return StepLimitReached(grid=self.grid, steps=self.steps)

    def validate_grid(self) -> List[str]:
        """
        Check every pair of adjacent resolved cells.
        Returns list of error messages (empty if valid).
        """
        errors = []
        for col, row in self.grid.positions():
            tile = self.grid.tile_at(col, row)
            if tile is None:
                continue
            for nx, ny, side in self.grid.neighbors(col, row):
                neighbor = self.grid.tile_at(nx, ny)
                if neighbor is None:
                    continue
                if not self.model.compatible(tile, neighbor, side):
                    errors.append(
                        f"({col},{row}) tile {tile} does not allow tile {neighbor} on {side.label}"
                    )
        return errors

    def _select_cell(self) -> Position:
        """Undecided cell with the fewest candidates; first in row-major order on ties."""
        best = None
        best_entropy = None
        for col, row in self.grid.positions():
            entropy = popcount(self.grid.at(col, row))
            if entropy <= 1:
                continue
            if best_entropy is None or entropy < best_entropy:
                best = (col, row)
                best_entropy = entropy
                if entropy == 2:
                    break
        return best

    def _propagate_from(self, col: int, row: int) -> bool:
        result = propagate(self.grid, self.model, (col, row), on_update=self._on_cell_updated)
        self.progress_updated.emit(self.grid.resolved_count(), self.total_cells)
        if not result.ok:
            self._contradict(result.contradiction)
            return False
        return True

    def _on_cell_updated(self, col: int, row: int):
        self.cell_updated.emit(col, row)

    def _check_finished(self) -> bool:
        if self.grid.is_solved():
            self.state = EngineState.SOLVED
            self.finished.emit(True)
            return True
        return False

    def _contradict(self, cell: Position):
        self.contradiction = cell
        self.state = EngineState.CONTRADICTED
        self.contradiction_found.emit(cell[0], cell[1])
        self.finished.emit(False)


def solve(
    width: int,
    height: int,
    model: CompatibilityModel,
    policy: Optional[TileSelectionPolicy] = None,
    locked: Optional[Dict[Position, int]] = None,
    max_steps: Optional[int] = None
) -> SolveResult:
    """
    Fill a fresh width x height grid.

    Args:
        width: Grid width
        height: Grid height
        model: Compatibility table
        policy: Tile selection policy (lowest index if omitted)
        locked: Cells pinned to a tile before solving, {(col, row): tile}
        max_steps: Optional cap on collapse steps

    Returns:
        Solved, Contradicted or StepLimitReached
    """
    driver = CollapseDriver(model, width, height, policy)
    for (col, row), tile in (locked or {}).items():
        if not driver.lock_cell(col, row, tile):
            break
    return driver.run(max_steps)


def solve_with_retries(
    width: int,
    height: int,
    model: CompatibilityModel,
    seed: Optional[int] = None,
    max_attempts: int = 10,
    policy: str = 'random',
    weights: Optional[Sequence[float]] = None,
    locked: Optional[Dict[Position, int]] = None,
    max_steps: Optional[int] = None
) -> SolveResult:
    """
    Restart on contradiction with a fresh grid and a new seed.

    Attempt n uses seed `seed + n` when a seed is given, so a run is
    reproducible. Returns the first Solved result, or the last failure.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    result = None
    for attempt in range(max_attempts):
        attempt_seed = None if seed is None else seed + attempt
        selector = make_policy(policy, attempt_seed, weights)
        result = solve(width, height, model, selector, locked, max_steps)
        result.attempts = attempt + 1

        if result.solved:
            logger.info(f"Solved {width}x{height} grid on attempt {attempt + 1} in {result.steps} steps")
            return result

        if isinstance(result, Contradicted):
            logger.warning(f"Attempt {attempt + 1}/{max_attempts}: contradiction at {result.cell}")
        else:
            logger.warning(f"Attempt {attempt + 1}/{max_attempts}: step limit reached")

        if getattr(selector, 'deterministic', False):
            # A deterministic policy would repeat the same outcome
            break

    return result
