from __future__ import annotations
import numpy as np
import numba as nb

NUM_SPLIT_SAMPLES = 5  # candidate planes per axis
COST_EPSILON = 1e-6    # floor for empty or flat sides


@nb.njit(inline="always", cache=True)
def surface_area(bmin, bmax) -> float:
    dx = float(bmax[0]) - float(bmin[0])
    dy = float(bmax[1]) - float(bmin[1])
    dz = float(bmax[2]) - float(bmin[2])
    return 2.0 * (dx * dy + dx * dz + dy * dz)


@nb.njit(cache=True)
def bounds_cost(bmin, bmax, count: int) -> float:
    """SAH cost of a box holding ``count`` triangles, floored at ``COST_EPSILON``."""
    if count == 0:
        return COST_EPSILON
    cost = surface_area(bmin, bmax) * count
    if cost < COST_EPSILON:
        return COST_EPSILON
    return cost


@nb.njit(cache=True)
def evaluate_split(axis: int, value: float, centroids, tri_min, tri_max,
                   start: int, end: int) -> float:
    """Cost of splitting ``[start, end)`` at ``centroid[axis] < value``.

    Side boxes are folded from the per-triangle bounds. Arrays are only read.
    """
    a_min = np.full(3, np.inf)
    a_max = np.full(3, -np.inf)
    b_min = np.full(3, np.inf)
    b_max = np.full(3, -np.inf)
    n_a = 0
    n_b = 0
    for i in range(start, end):
        if centroids[i, axis] < value:
            for k in range(3):
                if tri_min[i, k] < a_min[k]:
                    a_min[k] = tri_min[i, k]
                if tri_max[i, k] > a_max[k]:
                    a_max[k] = tri_max[i, k]
            n_a += 1
        else:
            for k in range(3):
                if tri_min[i, k] < b_min[k]:
                    b_min[k] = tri_min[i, k]
                if tri_max[i, k] > b_max[k]:
                    b_max[k] = tri_max[i, k]
            n_b += 1
    return bounds_cost(a_min, a_max, n_a) + bounds_cost(b_min, b_max, n_b)


@nb.njit(cache=True)
def sample_split(node_min, node_max, centroids, tri_min, tri_max,
                 start: int, end: int):
    """Return ``(axis, value, cost)`` of the cheapest sampled plane.

    Planes sit at ``(i + 1) / (NUM_SPLIT_SAMPLES + 1)`` of the node box on
    each axis. The first strict minimum wins. Ranges of one triangle or
    fewer cannot be split and report an infinite cost.
    """
    if end - start <= 1:
        return 0, 0.0, np.inf

    best_axis = 0
    best_value = 0.0
    best_cost = np.inf
    for axis in range(3):
        lo = float(node_min[axis])
        hi = float(node_max[axis])
        for i in range(NUM_SPLIT_SAMPLES):
            t = (i + 1) / (NUM_SPLIT_SAMPLES + 1.0)
            value = lo + (hi - lo) * t
            cost = evaluate_split(axis, value, centroids, tri_min, tri_max, start, end)
            if cost < best_cost:
                best_cost = cost
                best_axis = axis
                best_value = value
    return best_axis, best_value, best_cost


__all__ = [
    "NUM_SPLIT_SAMPLES",
    "COST_EPSILON",
    "surface_area",
    "bounds_cost",
    "evaluate_split",
    "sample_split",
]
