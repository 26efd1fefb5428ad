from array import array
from typing import Callable, Hashable, Optional


class DisjointSet:
    """
    Union-find over a fixed arena of integer slots.

    Elements are mapped to slots through 'key' (identity for plain ints), so a
    grid can hand in Cells directly with key=grid.index_of. Parent and size are
    kept in dense arrays; find() halves paths and union() attaches the smaller
    tree under the larger, keeping both near O(1) amortized.
    """

    __slots__ = ('parent', 'sizes', 'key', 'components')

    def __init__(self, count: int, key: Optional[Callable[[Hashable], int]] = None):
        self.parent = array('l', range(count))
        self.sizes = array('l', [1] * count)
        self.key = key
        self.components = count

    @classmethod
    def for_grid(cls, grid) -> "DisjointSet":
        return cls(grid.size, key=grid.index_of)

    def _slot(self, element) -> int:
        idx = self.key(element) if self.key else element
        if not 0 <= idx < len(self.parent):
            raise IndexError(f"Slot {idx} outside arena of size {len(self.parent)}")
        return idx

    def _root(self, idx: int) -> int:
        parent = self.parent
        while parent[idx] != idx:
            # Path halving
            parent[idx] = parent[parent[idx]]
            idx = parent[idx]
        return idx

    def find(self, element) -> int:
        """Canonical slot index of the set containing 'element'."""
        return self._root(self._slot(element))

    def union(self, a, b) -> bool:
        """Merges the sets of a and b. Returns False if they were already one set."""
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self.sizes[ra] < self.sizes[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.sizes[ra] += self.sizes[rb]
        self.components -= 1
        return True

    def same_set(self, a, b) -> bool:
        return self.find(a) == self.find(b)

    def set_size(self, element) -> int:
        return self.sizes[self.find(element)]

    def __len__(self):
        return len(self.parent)
