from typing import Dict, Iterator, List

from maze_weaver.algo.base import Generator
from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Cell


class WilsonGenerator(Generator):
    """
    Spanning tree by loop-erased random walks.

    Each walk starts from a random cell outside the tree and wanders until it
    hits the tree. Whenever it crosses its own path the loop is cut away, so
    only a simple path is ever grafted onto the tree.

    The walk never steps straight back to the cell it came from unless it
    has no other way out. That makes it a non-backtracking walk, and the
    resulting trees are not uniformly distributed the way Aldous-Broder's are.
    """

    name = "wilson"
    walk_moves = 0
    walks = 0

    def loop_erased_walk(self, start: Cell) -> List[Cell]:
        """
        Walks from 'start' until a visited cell is reached.
        Returns the loop-erased path, ending with that visited cell.
        """
        path: List[Cell] = [start]
        # Cell -> position in path, for O(1) loop detection
        index: Dict[Cell, int] = {start: 0}

        while True:
            current = path[-1]
            previous = path[-2] if len(path) > 1 else None
            nxt = self.grid.get_random_neighbor(current, exclude=[previous], rng=self.rng)
            if nxt is None:
                # Dead-end corridor: the only way out is back
                nxt = self.grid.get_random_neighbor(current, rng=self.rng)
            self.walk_moves += 1

            if nxt.visited:
                path.append(nxt)
                return path

            if nxt in index:
                # Erase the loop, keeping the first occurrence of nxt
                cut = index[nxt]
                for erased in path[cut + 1:]:
                    del index[erased]
                del path[cut + 1:]
            else:
                index[nxt] = len(path)
                path.append(nxt)

    def generate(self) -> Iterator[StepEvent]:
        self.walk_moves = 0
        self.walks = 0

        root = self.start_cell()
        self.visit(root)
        yield self.step("Starting Wilson's Algorithm")

        # Cells outside the tree, with their slot for swap removal
        self.unvisited: List[Cell] = [c for c in self.grid.iter_cells() if not c.visited]
        slots: Dict[Cell, int] = {c: i for i, c in enumerate(self.unvisited)}

        while self.unvisited:
            start = self.rng.choice(self.unvisited)
            path = self.loop_erased_walk(start)
            self.walks += 1

            for a, b in zip(path, path[1:]):
                self.carve(a, b)
                self.visit(a)
                # Swap remove for O(1)
                idx = slots.pop(a)
                last = self.unvisited.pop()
                if last is not a:
                    self.unvisited[idx] = last
                    slots[last] = idx
                yield self.step()
