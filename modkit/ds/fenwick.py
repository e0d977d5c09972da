"""Fenwick tree (binary indexed tree), 1-indexed.

Prefix sums and point updates over plain signed ints in O(log n)::

    fw = Fenwick.from_list([1, 2, 3, 4, 5])
    fw.sum(5)                # 15
    fw.sum(3) - fw.sum(1)    # 5
    fw.add(3, 10)
    fw.sum(3)                # 16
"""

from __future__ import annotations

from typing import Iterable, List


def _lsb(i: int) -> int:
    """Lowest set bit of i."""
    return i & -i


class Fenwick:
    def __init__(self) -> None:
        # _table[0] is unused
        self._table: List[int] = [0]

    @classmethod
    def from_list(cls, values: Iterable[int]) -> "Fenwick":
        """Build in O(n) by folding each node into its parent."""
        fw = cls()
        table = fw._table
        table.extend(values)
        n = len(table) - 1
        for i in range(1, n):
            j = i + _lsb(i)
            if j <= n:
                table[j] += table[i]
        return fw

    def __len__(self) -> int:
        return len(self._table) - 1

    def push(self, x: int) -> None:
        """Append a new element x."""
        n = len(self._table)
        k = _lsb(n)
        # Node n covers (n - k, n]; its children are n-1, n-2, n-4, ... n-k/2.
        i = 1
        while i != k:
            x += self._table[n - i]
            i <<= 1
        self._table.append(x)

    def sum(self, i: int) -> int:
        """Sum of the elements in [1, i]."""
        if not 0 <= i <= len(self):
            raise IndexError(f"Prefix index must be in [0, {len(self)}], got {i}")
        total = 0
        while i > 0:
            total += self._table[i]
            i -= _lsb(i)
        return total

    def range_sum(self, left: int, right: int) -> int:
        """Sum of the elements in [left, right]."""
        if left > right:
            raise ValueError(f"Empty range [{left}, {right}]")
        return self.sum(right) - self.sum(left - 1)

    def add(self, i: int, x: int) -> None:
        """Add x onto the i-th element."""
        n = len(self._table)
        if not 1 <= i < n:
            raise IndexError(f"Index must be in [1, {n - 1}], got {i}")
        while i < n:
            self._table[i] += x
            i += _lsb(i)
