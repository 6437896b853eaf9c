from __future__ import annotations
import logging
import time
from typing import Optional, Tuple

import numpy as np
import numba as nb

from .geometry import Geometry
from .nodes import NodeArray, NodeStore
from .split import bounds_cost, sample_split
from .stats import BuildStats, StatsAccumulator

logger = logging.getLogger(__name__)

MAX_DEPTH = 16
LEAF_THRESHOLD = 4  # triangles per leaf before splitting is considered


@nb.njit(inline="always", cache=True)
def _swap_rows(arr, i, j):
    tmp = arr[i].copy()
    arr[i] = arr[j]
    arr[j] = tmp


@nb.njit(cache=True)
def partition(triangles, centroids, tri_min, tri_max,
              start: int, end: int, axis: int, value: float) -> int:
    """Reorder ``[start, end)`` so side A (``centroid[axis] < value``) comes first.

    Two-pointer scan from both ends; every swap moves the triangle, its
    centroid and its bounds together. Returns the first index of side B,
    which may equal ``start`` or ``end``.
    """
    lo = start
    hi = end - 1
    while True:
        while lo <= hi and centroids[lo, axis] < value:
            lo += 1
        while lo <= hi and not (centroids[hi, axis] < value):
            hi -= 1
        if lo >= hi:
            break
        _swap_rows(triangles, lo, hi)
        _swap_rows(centroids, lo, hi)
        _swap_rows(tri_min, lo, hi)
        _swap_rows(tri_max, lo, hi)
        lo += 1
        hi -= 1
    return lo


@nb.njit(cache=True)
def range_bounds(tri_min, tri_max, start: int, end: int):
    """Fold per-triangle bounds over ``[start, end)``; inverted box when empty."""
    bmin = np.full(3, np.inf, np.float32)
    bmax = np.full(3, -np.inf, np.float32)
    for i in range(start, end):
        for k in range(3):
            if tri_min[i, k] < bmin[k]:
                bmin[k] = tri_min[i, k]
            if tri_max[i, k] > bmax[k]:
                bmax[k] = tri_max[i, k]
    return bmin, bmax


def build_bvh(geometry: Geometry,
              max_depth: int = MAX_DEPTH,
              leaf_threshold: int = LEAF_THRESHOLD,
              t_start: Optional[float] = None,
              ) -> Tuple[np.ndarray, NodeArray, BuildStats]:
    """Build the hierarchy over ``geometry`` and return ``(triangles, nodes, stats)``.

    The geometry arrays are reordered in place and belong to this build.
    Every leaf owns a contiguous range of the returned triangle array.
    """
    if t_start is None:
        t_start = time.perf_counter()
    assert max_depth >= 0 and leaf_threshold >= 0

    tris = geometry.triangles
    cent = geometry.centroids
    tmin = geometry.tri_min
    tmax = geometry.tri_max
    m = geometry.num_triangles

    store = NodeStore(capacity=2 * m)
    store.append(geometry.bounds_min, geometry.bounds_max, 0, m)

    def split_node(node: int, depth: int, acc: StatsAccumulator) -> None:
        start = int(store.start_index[node])
        end = int(store.end_index[node])
        assert depth >= 0 and 0 <= start <= end <= m
        count = end - start

        if depth == max_depth or count <= leaf_threshold:
            acc.record_leaf(depth, count)
            return

        node_min = store.bounds_min[node].copy()
        node_max = store.bounds_max[node].copy()
        parent_cost = bounds_cost(node_min, node_max, count)
        axis, value, cost = sample_split(node_min, node_max, cent, tmin, tmax, start, end)
        if cost >= parent_cost:
            acc.record_leaf(depth, count)
            return

        mid = partition(tris, cent, tmin, tmax, start, end, axis, value)
        if mid == start or mid == end:
            # one-sided plane; no child would hold fewer triangles
            acc.record_leaf(depth, count)
            return
        bmin_a, bmax_a = range_bounds(tmin, tmax, start, mid)
        bmin_b, bmax_b = range_bounds(tmin, tmax, mid, end)

        a = store.append(bmin_a, bmax_a, start, mid)
        b = store.append(bmin_b, bmax_b, mid, end)
        store.set_children(node, a, b)

        split_node(a, depth + 1, acc)
        split_node(b, depth + 1, acc)

    acc = StatsAccumulator()
    split_node(0, 0, acc)

    nodes = store.freeze()
    tris.flags.writeable = False
    elapsed_ms = (time.perf_counter() - t_start) * 1000.0
    stats = acc.finalize(elapsed_ms, m, len(nodes))
    logger.info(
        "BVH built in %.2f ms: %d triangles, %d nodes, %d leaves, depth=[%d, %d]",
        stats.time_ms, stats.triangles, stats.node_count, stats.leaf_count,
        stats.depth_min, stats.depth_max,
    )
    return tris, nodes, stats


__all__ = ["build_bvh", "partition", "range_bounds", "MAX_DEPTH", "LEAF_THRESHOLD"]
