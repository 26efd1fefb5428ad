from typing import Iterator, List, Tuple

from maze_weaver.algo.base import Generator
from maze_weaver.core.disjoint_set import DisjointSet
from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Cell, Grid


def build_edges(grid: Grid) -> List[Tuple[Cell, Cell]]:
    """One entry per adjacent pair: each cell paired with its upper and right neighbor."""
    edges = []
    for cell in grid.iter_cells():
        if cell.row > 0:
            edges.append((cell, grid.get_cell(cell.row - 1, cell.col)))
        if cell.col < grid.cols - 1:
            edges.append((cell, grid.get_cell(cell.row, cell.col + 1)))
    return edges


class KruskalGenerator(Generator):
    name = "kruskal"
    uses_start = False
    accepted = 0
    discarded = 0

    def generate(self) -> Iterator[StepEvent]:
        self.sets = DisjointSet.for_grid(self.grid)
        self.accepted = 0
        self.discarded = 0
        edges = build_edges(self.grid)

        while edges:
            idx = self.rng.randrange(len(edges))
            a, b = edges[idx]
            # Swap remove for O(1)
            edges[idx] = edges[-1]
            edges.pop()

            if self.sets.same_set(a, b):
                # Would close a cycle
                self.discarded += 1
                continue

            self.carve(a, b)
            self.sets.union(a, b)
            self.accepted += 1
            for cell in (a, b):
                if not cell.visited:
                    self.visit(cell)
            yield self.step()

        # Only a 1x1 grid has a cell no edge touched
        for cell in self.grid.iter_cells():
            if not cell.visited:
                self.visit(cell)
