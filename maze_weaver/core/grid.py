import random
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np

from maze_weaver.core.errors import ConfigurationError, DimensionMismatch, NotAdjacent, OutOfBounds


class Cell:
    __slots__ = ('_row', '_col', 'walls', 'visited')

    def __init__(self, row: int, col: int):
        self._row = row
        self._col = col
        # All walls present by default (T|R|B|L) = 15
        self.walls = Grid.ALL_WALLS
        self.visited = False

    @property
    def row(self) -> int:
        return self._row

    @property
    def col(self) -> int:
        return self._col

    def has_wall(self, direction: int) -> bool:
        return (self.walls & direction) != 0

    def wall_flags(self) -> Dict[str, bool]:
        """Wall state keyed by side name, the shape renderers read."""
        return {name: self.has_wall(bit) for bit, name in Grid.NAMES.items()}

    def __repr__(self):
        return f"Cell({self._row}, {self._col})"


class Grid:
    # Bitmask Constants
    TOP    = 0b0001
    RIGHT  = 0b0010
    BOTTOM = 0b0100
    LEFT   = 0b1000

    ALL_WALLS = TOP | RIGHT | BOTTOM | LEFT

    # Direction Helpers (row, col offsets)
    DROW = {TOP: -1, BOTTOM: 1, RIGHT: 0, LEFT: 0}
    DCOL = {TOP: 0, BOTTOM: 0, RIGHT: 1, LEFT: -1}
    OPPOSITE = {TOP: BOTTOM, BOTTOM: TOP, RIGHT: LEFT, LEFT: RIGHT}
    NAMES = {TOP: "top", RIGHT: "right", BOTTOM: "bottom", LEFT: "left"}

    __slots__ = ('_rows', '_cols', 'cells')

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise ConfigurationError(f"Grid dimensions must be at least 1x1, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols
        self.cells: List[List[Cell]] = [[Cell(r, c) for c in range(cols)] for r in range(rows)]

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def size(self) -> int:
        return self._rows * self._cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get_cell(self, row: int, col: int) -> Cell:
        if self.in_bounds(row, col):
            return self.cells[row][col]
        raise OutOfBounds(row, col, self._rows, self._cols)

    def index_of(self, cell: Cell) -> int:
        return cell.row * self._cols + cell.col

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def get_neighbors(self, cell: Cell) -> List[Cell]:
        """
        Grid-adjacent cells in the order up, right, down, left.
        Walls are not considered.
        """
        row, col = cell.row, cell.col
        neighbors = []
        if row > 0:
            neighbors.append(self.cells[row - 1][col])
        if col < self._cols - 1:
            neighbors.append(self.cells[row][col + 1])
        if row < self._rows - 1:
            neighbors.append(self.cells[row + 1][col])
        if col > 0:
            neighbors.append(self.cells[row][col - 1])
        return neighbors

    def get_unvisited_neighbors(self, cell: Cell) -> List[Cell]:
        return [n for n in self.get_neighbors(cell) if not n.visited]

    def get_random_neighbor(self, cell: Cell, exclude: Iterable[Cell] = (), rng=None) -> Optional[Cell]:
        """
        Uniform pick among neighbors not in 'exclude'.
        Returns None when every neighbor is excluded.
        """
        excluded = [c for c in exclude if c is not None]
        candidates = [n for n in self.get_neighbors(cell) if n not in excluded]
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    def get_unvisited_cells(self) -> List[Cell]:
        return [c for c in self.iter_cells() if not c.visited]

    def get_random_unvisited_cell(self, rng=None) -> Optional[Cell]:
        unvisited = self.get_unvisited_cells()
        if not unvisited:
            return None
        return (rng or random).choice(unvisited)

    def direction_between(self, a: Cell, b: Cell) -> int:
        """Direction bit pointing from 'a' to 'b'."""
        drow = b.row - a.row
        dcol = b.col - a.col
        if drow == -1 and dcol == 0:
            return self.TOP
        if drow == 1 and dcol == 0:
            return self.BOTTOM
        if drow == 0 and dcol == 1:
            return self.RIGHT
        if drow == 0 and dcol == -1:
            return self.LEFT
        raise NotAdjacent(a, b)

    def remove_walls(self, a: Cell, b: Cell) -> int:
        """
        Removes the wall between two adjacent cells.
        Clears the facing bit on BOTH cells so the pair stays consistent.
        """
        direction = self.direction_between(a, b)
        a.walls &= ~direction
        b.walls &= ~self.OPPOSITE[direction]
        return direction

    def reset(self):
        for cell in self.iter_cells():
            cell.walls = self.ALL_WALLS
            cell.visited = False

    def append_row(self, cells: Optional[Sequence[Cell]] = None):
        row = self._rows
        if cells is None:
            cells = [Cell(row, c) for c in range(self._cols)]
        if len(cells) != self._cols:
            raise DimensionMismatch(self._cols, len(cells), "Row")
        for col, cell in enumerate(cells):
            if cell.row != row or cell.col != col:
                raise ConfigurationError(f"{cell!r} cannot be placed at ({row}, {col})")
        self.cells.append(list(cells))
        self._rows += 1

    def append_column(self, cells: Optional[Sequence[Cell]] = None):
        col = self._cols
        if cells is None:
            cells = [Cell(r, col) for r in range(self._rows)]
        if len(cells) != self._rows:
            raise DimensionMismatch(self._rows, len(cells), "Column")
        for row, cell in enumerate(cells):
            if cell.row != row or cell.col != col:
                raise ConfigurationError(f"{cell!r} cannot be placed at ({row}, {col})")
        for row, cell in zip(self.cells, cells):
            row.append(cell)
        self._cols += 1

    def visited_count(self) -> int:
        return sum(1 for c in self.iter_cells() if c.visited)

    def passage_count(self) -> int:
        """Number of interior walls removed so far (each counted once)."""
        count = 0
        for cell in self.iter_cells():
            if cell.col < self._cols - 1 and not cell.walls & self.RIGHT:
                count += 1
            if cell.row < self._rows - 1 and not cell.walls & self.BOTTOM:
                count += 1
        return count

    def to_wall_array(self) -> np.ndarray:
        """(rows, cols) uint8 array of wall bitmasks."""
        return np.array([[c.walls for c in row] for row in self.cells], dtype=np.uint8)
