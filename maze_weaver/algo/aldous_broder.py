from typing import Iterator

from maze_weaver.algo.base import Generator
from maze_weaver.core.events import StepEvent


class AldousBroderGenerator(Generator):
    """
    Uniform spanning tree by unbiased random walk.

    The walk moves to any neighbor, visited or not, and only carves when it
    enters a cell for the first time. There is no step cap: termination is
    probabilistic (with probability 1) and the run time varies a lot.
    """

    name = "aldous-broder"
    moves = 0

    def generate(self) -> Iterator[StepEvent]:
        self.moves = 0
        total = self.grid.size

        current = self.start_cell()
        self.visit(current)

        while self.visited < total:
            nxt = self.grid.get_random_neighbor(current, rng=self.rng)
            if not nxt.visited:
                self.carve(current, nxt)
                self.visit(nxt)
            current = nxt
            self.moves += 1
            yield self.step("Walking...")
