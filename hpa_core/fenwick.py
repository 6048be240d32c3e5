# Copyright (c) 2025 HPA Maintainers
# License: MIT
"""
Cumulative-weight index (Fenwick / binary indexed tree) over non-negative integer weights.

Provides:
- FenwickTree: point update, point query, prefix sums, and inverse prefix search,
  each in O(log n); capacity grows by doubling so the number of slots need not be
  known in advance.

Notes
- Slots are keyed by vertex id; a zero weight removes a slot from sampling without
  relinking anything.
- `find(x)` descends the implicit tree instead of binary-searching over prefix sums,
  so a weighted draw costs O(log n) rather than O(log^2 n).
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class FenwickTree:
    """
    Fenwick tree over integer weights.

    Data structures
    - _tree: 1-based implicit tree; _tree[i] covers (i - lowbit(i), i]
    - _values: raw per-slot weights (0-based), kept for O(1) point queries and rebuilds
    """

    def __init__(self, capacity: int = 16, values: Optional[Iterable[int]] = None) -> None:
        init = [int(v) for v in values] if values is not None else []
        cap = max(1, int(capacity), len(init))
        self._values: List[int] = init + [0] * (cap - len(init))
        self._tree: List[int] = [0] * (cap + 1)
        self._total = 0
        self._rebuild()

    def _rebuild(self) -> None:
        n = len(self._values)
        tree = [0] * (n + 1)
        for i, v in enumerate(self._values, start=1):
            if v < 0:
                raise ValueError(f"weights must be non-negative, got {v} at slot {i - 1}")
            tree[i] += v
            parent = i + (i & -i)
            if parent <= n:
                tree[parent] += tree[i]
        self._tree = tree
        self._total = sum(self._values)

    @property
    def capacity(self) -> int:
        return len(self._values)

    @property
    def total(self) -> int:
        return self._total

    def __len__(self) -> int:
        return len(self._values)

    def ensure_capacity(self, size: int) -> None:
        """Grow (doubling) until at least `size` slots exist."""
        cap = len(self._values)
        if size <= cap:
            return
        while cap < size:
            cap *= 2
        self._values.extend([0] * (cap - len(self._values)))
        self._rebuild()

    def get(self, i: int) -> int:
        return self._values[i]

    def add(self, i: int, delta: int) -> None:
        """Add `delta` to slot i (0-based)."""
        if i < 0:
            raise IndexError(f"negative slot {i}")
        self.ensure_capacity(i + 1)
        new = self._values[i] + delta
        if new < 0:
            raise ValueError(f"weight of slot {i} would become negative ({new})")
        self._values[i] = new
        self._total += delta
        n = len(self._values)
        j = i + 1
        while j <= n:
            self._tree[j] += delta
            j += j & -j

    def set(self, i: int, value: int) -> None:
        self.ensure_capacity(i + 1)
        self.add(i, int(value) - self._values[i])

    def prefix_sum(self, i: int) -> int:
        """Sum of slots [0, i)."""
        s = 0
        j = min(i, len(self._values))
        while j > 0:
            s += self._tree[j]
            j -= j & -j
        return s

    def range_sum(self, i: int, j: int) -> int:
        """Sum of slots [i, j)."""
        if j <= i:
            return 0
        return self.prefix_sum(j) - self.prefix_sum(i)

    def find(self, x: int) -> int:
        """
        Smallest slot index i such that prefix_sum(i + 1) >= x.

        Requires 1 <= x <= total. Slots of weight zero are never returned.
        """
        if x < 1 or x > self._total:
            raise ValueError(f"x must lie in [1, {self._total}], got {x}")
        n = len(self._values)
        pos = 0
        rem = x
        step = 1 << (n.bit_length() - 1)
        while step:
            nxt = pos + step
            if nxt <= n and self._tree[nxt] < rem:
                pos = nxt
                rem -= self._tree[nxt]
            step >>= 1
        return pos

    def to_list(self) -> List[int]:
        return list(self._values)


__all__ = ["FenwickTree"]
