from typing import Dict, Generator as Steps, List

from maze_weaver.algo.base import Generator
from maze_weaver.core.errors import ConfigurationError
from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Grid


class EllerGenerator(Generator):
    """
    Row-by-row generation keeping one set id per column of the current row.

    Only the current row's ids are ever held, so memory is O(cols). Merges are
    visible inside the row alone, which is why a plain list with linear
    relabelling stands in for a full disjoint set.

    merge_probability: chance of joining two distinct neighboring sets on
                       intermediate rows (the last row always joins).
    down_probability:  chance of each extra downward link beyond the one every
                       set is guaranteed.
    """

    name = "eller"
    uses_start = False

    def __init__(self, grid: Grid, seed: int = None, start=None, rng=None,
                 merge_probability: float = 0.5, down_probability: float = 0.25):
        super().__init__(grid, seed=seed, start=start, rng=rng)
        for label, value in (("merge_probability", merge_probability), ("down_probability", down_probability)):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{label} must be within [0, 1], got {value}")
        self.merge_probability = merge_probability
        self.down_probability = down_probability
        self.sets: List[int] = []
        self.next_id = 0

    def initial_sets(self) -> List[int]:
        self.next_id = self.grid.cols
        return list(range(self.grid.cols))

    def enter_row(self, row: int):
        for cell in self.grid.cells[row]:
            if not cell.visited:
                self.visit(cell)

    def merge_row(self, row: int, sets: List[int], probability: float) -> Steps[StepEvent, None, List[int]]:
        """Horizontal pass. Returns the row's set ids after merging."""
        sets = list(sets)
        for col in range(self.grid.cols - 1):
            if sets[col] == sets[col + 1]:
                continue
            if probability < 1.0 and self.rng.random() >= probability:
                continue
            self.carve(self.grid.get_cell(row, col), self.grid.get_cell(row, col + 1))
            old, new = sets[col + 1], sets[col]
            for i, value in enumerate(sets):
                if value == old:
                    sets[i] = new
            self.sets = sets
            yield self.step("Merging row...")
        return sets

    def descend(self, row: int, sets: List[int]) -> Steps[StepEvent, None, List[int]]:
        """
        Vertical pass from 'row' into 'row + 1'. Every set carries at least one
        column down; columns left without a link start a fresh set.
        Returns the set ids of the next row.
        """
        members: Dict[int, List[int]] = {}
        for col, set_id in enumerate(sets):
            members.setdefault(set_id, []).append(col)

        down = set()
        for cols in members.values():
            down.add(self.rng.choice(cols))
            for col in cols:
                if col not in down and self.rng.random() < self.down_probability:
                    down.add(col)

        next_sets: List[int] = [-1] * self.grid.cols
        for col in sorted(down):
            below = self.grid.get_cell(row + 1, col)
            self.carve(self.grid.get_cell(row, col), below)
            self.visit(below)
            next_sets[col] = sets[col]
            yield self.step("Descending...")

        for col in range(self.grid.cols):
            if next_sets[col] == -1:
                next_sets[col] = self.next_id
                self.next_id += 1

        self.enter_row(row + 1)
        self.sets = next_sets
        yield self.step(f"Row {row + 1}")
        return next_sets

    def generate(self) -> Steps[StepEvent, None, None]:
        last = self.grid.rows - 1
        sets = self.initial_sets()
        self.sets = sets
        self.enter_row(0)
        yield self.step("Row 0")

        for row in range(last):
            sets = yield from self.merge_row(row, sets, self.merge_probability)
            sets = yield from self.descend(row, sets)

        # Last row: join everything still apart, no coin flip
        yield from self.merge_row(last, sets, 1.0)
