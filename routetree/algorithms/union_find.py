"""Disjoint-set union used to keep junction trees acyclic."""
from typing import List


class UnionFind:
    """
    Union-Find over a fixed universe ``0..n-1``.

    Every element starts in its own set. Path compression and union by
    rank keep operations near-constant amortized.
    """

    def __init__(self, n: int):
        self.parent: List[int] = list(range(n))
        self.rank: List[int] = [0] * n
        self._components = n

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        """Find with path compression"""
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """Union by rank, returns True if newly connected"""
        px, py = self.find(x), self.find(y)
        if px == py:
            return False
        if self.rank[px] < self.rank[py]:
            px, py = py, px
        self.parent[py] = px
        if self.rank[px] == self.rank[py]:
            self.rank[px] += 1
        self._components -= 1
        return True

    def connected(self, x: int, y: int) -> bool:
        """Check if two elements are in the same set"""
        return self.find(x) == self.find(y)

    def num_components(self) -> int:
        """Count number of distinct components"""
        return self._components

    def done(self) -> bool:
        """True once every element belongs to a single set."""
        return self._components <= 1
