from typing import Iterator, List

from maze_weaver.algo.base import Generator
from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Cell


class RecursiveBacktracker(Generator):
    name = "dfs"
    dead_ends = 0

    def generate(self) -> Iterator[StepEvent]:
        self.dead_ends = 0

        # Start at (0,0) unless told otherwise
        start = self.start_cell(default=(0, 0))
        self.visit(start)

        stack: List[Cell] = [start]

        while stack:
            current = stack[-1]
            neighbors = self.grid.get_unvisited_neighbors(current)

            if neighbors:
                chosen = self.rng.choice(neighbors)
                self.carve(current, chosen)
                self.visit(chosen)
                # current stays on the stack for backtracking
                stack.append(chosen)
                yield self.step("Carving...")
            else:
                stack.pop()
                self.dead_ends += 1
                yield self.step("Backtracking...")
