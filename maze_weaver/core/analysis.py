from collections import deque
from typing import Dict, List, Set

import numpy as np

from maze_weaver.core.grid import Cell, Grid


def open_neighbors(grid: Grid, cell: Cell) -> List[Cell]:
    """Neighbors reachable from 'cell' through a removed wall."""
    return [n for n in grid.get_neighbors(cell) if not cell.has_wall(grid.direction_between(cell, n))]


def reachable_from(grid: Grid, start: Cell) -> Set[Cell]:
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for n in open_neighbors(grid, current):
            if n not in seen:
                seen.add(n)
                queue.append(n)
    return seen


def connected_components(grid: Grid) -> int:
    """Number of regions the current walls split the grid into (flood fill)."""
    seen: Set[Cell] = set()
    components = 0
    for cell in grid.iter_cells():
        if cell not in seen:
            components += 1
            seen |= reachable_from(grid, cell)
    return components


def is_spanning_tree(grid: Grid) -> bool:
    """
    A perfect maze: every cell reachable from (0,0) and exactly rows*cols - 1
    passages, which together rule out cycles.
    """
    if grid.passage_count() != grid.size - 1:
        return False
    return len(reachable_from(grid, grid.get_cell(0, 0))) == grid.size


def calculate_stats(grid: Grid) -> Dict[str, float]:
    walls = grid.to_wall_array()

    # Border walls can never be opened, so count only the open sides.
    open_sides = np.zeros(walls.shape, dtype=np.uint8)
    for bit in (Grid.TOP, Grid.RIGHT, Grid.BOTTOM, Grid.LEFT):
        open_sides += ((walls & bit) == 0).astype(np.uint8)

    total = grid.size
    dead_ends = int(np.count_nonzero(open_sides == 1))
    corridors = int(np.count_nonzero(open_sides == 2))
    junctions = int(np.count_nonzero(open_sides >= 3))
    return {
        "dead_ends": dead_ends,
        "corridors": corridors,
        "junctions": junctions,
        "passages": grid.passage_count(),
        "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0,
    }
