import logging
import random
from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from maze_weaver.core.errors import ConfigurationError
from maze_weaver.core.events import StepEvent, StepReporter
from maze_weaver.core.grid import Cell, Grid

logger = logging.getLogger(__name__)


class Generator(ABC):
    name = "base"
    # Kruskal and Eller have no notion of a starting cell
    uses_start = True

    def __init__(self, grid: Grid, seed: int = None, start: Optional[Tuple[int, int]] = None, rng=None):
        self.grid = grid
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        if start is not None and not grid.in_bounds(*start):
            raise ConfigurationError(f"Start cell {start} outside {grid.rows}x{grid.cols} grid")
        self.start = start
        self.step_count = 0
        self.walls_removed = 0
        self.visited = 0
        self.reporter = StepReporter(grid.size)

    def start_cell(self, default: Optional[Tuple[int, int]] = None) -> Cell:
        """Configured start, else 'default', else a uniformly random cell."""
        if self.start is not None:
            return self.grid.get_cell(*self.start)
        if default is not None:
            return self.grid.get_cell(*default)
        return self.rng.choice(list(self.grid.iter_cells()))

    def visit(self, cell: Cell):
        cell.visited = True
        self.visited += 1

    def carve(self, a: Cell, b: Cell):
        self.grid.remove_walls(a, b)
        self.walls_removed += 1

    def step(self, label: str = "On Going...") -> StepEvent:
        self.step_count += 1
        return self.reporter.step(self.visited, label)

    def run(self) -> Iterator[StepEvent]:
        """
        Yields a StepEvent after every completed step and a final done event.
        The grid is modified in-place on self.grid and is consistent at every yield.
        """
        self.reporter = StepReporter(self.grid.size)
        self.step_count = 0
        self.walls_removed = 0
        self.visited = 0
        logger.debug("%s starting on %dx%d grid (seed=%s)", self.name, self.grid.rows, self.grid.cols, self.seed)
        yield from self.generate()
        yield self.reporter.done(self.visited)

    @abstractmethod
    def generate(self) -> Iterator[StepEvent]:
        pass

    def run_all(self) -> StepEvent:
        """Helper to run the generator to completion. Returns the done event."""
        event = None
        for event in self.run():
            pass
        return event
