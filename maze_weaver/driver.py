import logging
import time
import weakref
from typing import Callable, Optional

from maze_weaver.algo.base import Generator
from maze_weaver.algo.registry import create_generator
from maze_weaver.config import GenerationConfig
from maze_weaver.core.errors import ConfigurationError, GenerationInProgress
from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Grid

logger = logging.getLogger(__name__)

Sink = Callable[[StepEvent], None]


class GenerationContext:
    """One in-flight generation per Grid, made explicit."""

    def __init__(self, grid: Grid):
        self.grid = grid
        self._active: Optional[str] = None
        self._token: Optional[object] = None

    @property
    def in_progress(self) -> bool:
        return self._active is not None

    def begin(self, name: str) -> object:
        """Claims the grid. The returned token identifies this run to finish()."""
        if self._active is not None:
            raise GenerationInProgress(f"'{self._active}' is still generating on this grid")
        self._active = name
        self._token = object()
        return self._token

    def finish(self, token: Optional[object] = None):
        # A stale token belongs to an earlier run and must not free a newer one
        if token is not None and token is not self._token:
            return
        self._active = None
        self._token = None


class GenerationRun:
    """
    Iterator over one generation's StepEvents.

    Each next() advances the generator by exactly one step, forwards the event
    to the sink and then sleeps for the configured delay. Stopping early is
    just not calling next() again: close(), driver.cancel() or dropping the
    last reference to the run releases the grid for the next one.
    """

    def __init__(self, driver: "MazeDriver", generator: Generator, token: object):
        self.driver = driver
        self.generator = generator
        self.token = token
        self.last_event: Optional[StepEvent] = None
        self.closed = False
        self._steps = generator.run()
        weakref.finalize(self, driver.context.finish, token)

    def __iter__(self):
        return self

    def __next__(self) -> StepEvent:
        if self.closed:
            raise StopIteration
        try:
            event = next(self._steps)
        except Exception:
            # Includes StopIteration: the run is over either way
            self.close()
            raise

        self.last_event = event
        if self.driver.sink:
            self.driver.sink(event)
        if self.driver.delay_ms > 0 and not event.done:
            self.driver.sleep(self.driver.delay_ms / 1000)
        return event

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._steps.close()
        self.driver.context.finish(self.token)


class MazeDriver:
    def __init__(self, grid: Grid, delay_ms: float = 0, sink: Optional[Sink] = None,
                 sleep: Callable[[float], None] = time.sleep):
        if delay_ms < 0:
            raise ConfigurationError(f"Delay must not be negative, got {delay_ms}")
        self.grid = grid
        self.delay_ms = delay_ms
        self.sink = sink
        self.sleep = sleep
        self.context = GenerationContext(grid)
        # Weak, so a run the caller drops is collected and frees the grid
        self._current: Optional[weakref.ref] = None

    @classmethod
    def from_config(cls, config: GenerationConfig, sink: Optional[Sink] = None) -> "MazeDriver":
        config.validate()
        return cls(Grid(config.rows, config.cols), delay_ms=config.delay_ms, sink=sink)

    @property
    def in_progress(self) -> bool:
        return self.context.in_progress

    @property
    def current(self) -> Optional[GenerationRun]:
        return self._current() if self._current is not None else None

    def steps(self, algo: str, **kwargs) -> GenerationRun:
        """
        Starts a generation and returns its step iterator.
        Raises GenerationInProgress while another run holds the grid.
        """
        token = self.context.begin(algo)
        try:
            self.grid.reset()
            generator = create_generator(algo, self.grid, **kwargs)
        except Exception:
            self.context.finish(token)
            raise
        logger.debug("Starting %s on %dx%d grid", algo, self.grid.rows, self.grid.cols)
        run = GenerationRun(self, generator, token)
        self._current = weakref.ref(run)
        return run

    def steps_for(self, config: GenerationConfig) -> GenerationRun:
        return self.steps(config.algo, **config.generator_kwargs())

    def generate(self, algo: str, **kwargs) -> Optional[StepEvent]:
        """Runs to completion (or cancellation). Returns the last event seen."""
        run = self.steps(algo, **kwargs)
        for _ in run:
            pass
        return run.last_event

    def cancel(self):
        """Stops the active run at its current step boundary and frees the grid."""
        run = self.current
        if run is not None and not run.closed:
            logger.info("Generation cancelled after %d steps", run.generator.step_count)
            run.close()
