import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from maze_weaver.core.errors import ContractViolation

logger = logging.getLogger(__name__)

PHASE_DONE = "Done !"
PHASE_ONGOING = "On Going..."


@dataclass(frozen=True)
class StepEvent:
    visited_count: int
    total_cells: int
    percent_complete: float
    eta_millis: int
    phase_label: str
    elapsed_millis: int = 0

    @property
    def done(self) -> bool:
        return self.phase_label == PHASE_DONE

    def messages(self) -> Tuple[str, ...]:
        """Human-readable status lines, one per fact."""
        lines = [
            self.phase_label,
            f"visited: {self.visited_count} / {self.total_cells}",
            f"finished: {self.percent_complete:.2f}%",
            f"time remaining: {self.eta_millis // 1000}s",
        ]
        if self.done:
            lines.append(f"total time: {self.elapsed_millis // 1000}s and {self.elapsed_millis % 1000}ms")
        return tuple(lines)


class StepReporter:
    """
    Turns raw visited counts into StepEvents.

    The reporter owns the run's clock and enforces that visited counts never
    move backwards, so every sink downstream sees a monotonic progress stream.
    """

    def __init__(self, total_cells: int, clock: Callable[[], float] = time.monotonic):
        self.total_cells = total_cells
        self.clock = clock
        self.started = clock()
        self.last_visited = 0
        self.finished = False

    def _elapsed_millis(self) -> int:
        return int((self.clock() - self.started) * 1000)

    def _check(self, visited_count: int):
        if self.finished:
            raise ContractViolation("Reporter already emitted its done event")
        if visited_count < self.last_visited:
            raise ContractViolation(f"Visited count went backwards: {self.last_visited} -> {visited_count}")
        if visited_count > self.total_cells:
            raise ContractViolation(f"Visited count {visited_count} exceeds {self.total_cells} cells")
        self.last_visited = visited_count

    def _percent(self, visited_count: int) -> float:
        return visited_count / self.total_cells * 100

    def step(self, visited_count: int, label: str = PHASE_ONGOING) -> StepEvent:
        self._check(visited_count)
        elapsed = self._elapsed_millis()
        remaining = self.total_cells - visited_count
        eta = int(elapsed / visited_count * remaining) if visited_count else 0
        return StepEvent(visited_count, self.total_cells, self._percent(visited_count), eta, label, elapsed)

    def done(self, visited_count: int) -> StepEvent:
        self._check(visited_count)
        self.finished = True
        return StepEvent(visited_count, self.total_cells, self._percent(visited_count), 0, PHASE_DONE,
                         self._elapsed_millis())


def log_status(*messages: str):
    logger.info(" | ".join(messages))


class LoggingSink:
    """Forwards events to a logger: progress at DEBUG, the done event at INFO."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self.last: Optional[StepEvent] = None

    def __call__(self, event: StepEvent):
        self.last = event
        level = logging.INFO if event.done else logging.DEBUG
        self.log.log(level, " | ".join(event.messages()))
