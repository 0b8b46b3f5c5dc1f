"""
Disjoint-set forest over segment indices.
"""

from typing import Dict, List


class UnionFind:
    """
    Array-based Union-Find with union by rank and path compression.

    Example:
        >>> uf = UnionFind(4)
        >>> uf.union(0, 1)
        >>> uf.connected(0, 1), uf.connected(1, 2)
        (True, False)
    """

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def __len__(self) -> int:
        return len(self.parent)

    def find(self, x: int) -> int:
        """Root of ``x``'s set; compresses the path to the root."""
        root = x
        while self.parent[root] != root:
            root = self.parent[root]

        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]

        return root

    def union(self, x: int, y: int) -> bool:
        """
        Merge the sets of ``x`` and ``y``.

        Returns:
            merged: False if they were already in the same set
        """
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return False

        if self.rank[root_x] < self.rank[root_y]:
            self.parent[root_x] = root_y
        elif self.rank[root_x] > self.rank[root_y]:
            self.parent[root_y] = root_x
        else:
            self.parent[root_y] = root_x
            self.rank[root_x] += 1

        return True

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def groups(self) -> Dict[int, List[int]]:
        """
        Members of every set keyed by root.

        Groups appear in order of their smallest member and members are
        listed in ascending order.
        """
        groups: Dict[int, List[int]] = {}
        for i in range(len(self.parent)):
            groups.setdefault(self.find(i), []).append(i)
        return groups
