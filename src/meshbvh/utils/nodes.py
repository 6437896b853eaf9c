from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

NO_CHILD = -1


@dataclass(frozen=True)
class Node:
    """Read-only view of one node.

    Leaves own ``[start_index, end_index)`` of the reordered triangle array
    and have no children. Internal nodes own the contiguous pair
    ``child_a`` / ``child_b == child_a + 1``.
    """
    bounds_min: np.ndarray
    bounds_max: np.ndarray
    start_index: int
    end_index: int
    child_a: int = NO_CHILD
    child_b: int = NO_CHILD

    @property
    def is_leaf(self) -> bool:
        return self.child_a == NO_CHILD

    @property
    def num_triangles(self) -> int:
        return self.end_index - self.start_index if self.is_leaf else 0


class NodeStore:
    """Append-only node arena addressed by index.

    Nodes are never removed and their indices stay valid. The only write
    after ``append`` is :meth:`set_children`, once per parent.
    """

    def __init__(self, capacity: int = 1):
        capacity = max(int(capacity), 1)
        self._size = 0
        self.bounds_min = np.empty((capacity, 3), np.float32)
        self.bounds_max = np.empty((capacity, 3), np.float32)
        self.start_index = np.empty(capacity, np.int32)
        self.end_index = np.empty(capacity, np.int32)
        self.child_a = np.empty(capacity, np.int32)
        self.child_b = np.empty(capacity, np.int32)

    def __len__(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return self.start_index.shape[0]

    def _grow(self) -> None:
        cap = self.capacity * 2
        for name in ("bounds_min", "bounds_max", "start_index",
                     "end_index", "child_a", "child_b"):
            old = getattr(self, name)
            new = np.empty((cap,) + old.shape[1:], old.dtype)
            new[: self._size] = old[: self._size]
            setattr(self, name, new)

    def append(self, bmin, bmax, start: int, end: int) -> int:
        assert 0 <= start <= end, f"invalid triangle range [{start}, {end})"
        if self._size == self.capacity:
            self._grow()
        node = self._size
        self.bounds_min[node] = bmin
        self.bounds_max[node] = bmax
        self.start_index[node] = start
        self.end_index[node] = end
        self.child_a[node] = NO_CHILD
        self.child_b[node] = NO_CHILD
        self._size += 1
        return node

    def get(self, node: int) -> Node:
        if not 0 <= node < self._size:
            raise IndexError(f"node index {node} out of range [0, {self._size})")
        return Node(
            bounds_min=self.bounds_min[node].copy(),
            bounds_max=self.bounds_max[node].copy(),
            start_index=int(self.start_index[node]),
            end_index=int(self.end_index[node]),
            child_a=int(self.child_a[node]),
            child_b=int(self.child_b[node]),
        )

    def set_children(self, node: int, child_a: int, child_b: int) -> None:
        if not 0 <= node < self._size:
            raise IndexError(f"node index {node} out of range [0, {self._size})")
        if self.child_a[node] != NO_CHILD:
            raise RuntimeError(f"children of node {node} are already set")
        assert node < child_a < self._size and child_b == child_a + 1, \
            f"children ({child_a}, {child_b}) are not a contiguous pair after {node}"
        self.child_a[node] = child_a
        self.child_b[node] = child_b

    def freeze(self) -> "NodeArray":
        n = self._size
        return NodeArray(
            bounds_min=self.bounds_min[:n].copy(),
            bounds_max=self.bounds_max[:n].copy(),
            start_index=self.start_index[:n].copy(),
            end_index=self.end_index[:n].copy(),
            child_a=self.child_a[:n].copy(),
            child_b=self.child_b[:n].copy(),
        )


class NodeArray:
    """Finished, immutable node array. Node 0 is the root."""

    def __init__(self, bounds_min, bounds_max, start_index, end_index,
                 child_a, child_b):
        self.bounds_min = bounds_min
        self.bounds_max = bounds_max
        self.start_index = start_index
        self.end_index = end_index
        self.child_a = child_a
        self.child_b = child_b
        for arr in (bounds_min, bounds_max, start_index, end_index, child_a, child_b):
            arr.flags.writeable = False

    def __len__(self) -> int:
        return int(self.start_index.shape[0])

    def __getitem__(self, node: int) -> Node:
        if not 0 <= node < len(self):
            raise IndexError(f"node index {node} out of range [0, {len(self)})")
        return Node(
            bounds_min=self.bounds_min[node],
            bounds_max=self.bounds_max[node],
            start_index=int(self.start_index[node]),
            end_index=int(self.end_index[node]),
            child_a=int(self.child_a[node]),
            child_b=int(self.child_b[node]),
        )

    def is_leaf(self, node: int) -> bool:
        return bool(self.child_a[node] == NO_CHILD)

    def num_triangles(self, node: int) -> int:
        if not self.is_leaf(node):
            return 0
        return int(self.end_index[node] - self.start_index[node])

    def walk(self, max_depth: Optional[int] = None) -> Iterator[Tuple[int, int]]:
        """Yield ``(node, depth)`` depth-first from the root, child A before B.

        Nodes deeper than ``max_depth`` are skipped when it is given.
        """
        if len(self) == 0:
            return
        stack: List[Tuple[int, int]] = [(0, 0)]
        while stack:
            node, depth = stack.pop()
            if max_depth is not None and depth > max_depth:
                continue
            yield node, depth
            if not self.is_leaf(node):
                stack.append((int(self.child_b[node]), depth + 1))
                stack.append((int(self.child_a[node]), depth + 1))

    def leaves(self) -> List[int]:
        return [node for node, _ in self.walk() if self.is_leaf(node)]


__all__ = ["NO_CHILD", "Node", "NodeStore", "NodeArray"]
