from __future__ import annotations

"""Builder internals.

Re-exports the pieces a caller may want to drive directly:
    from meshbvh.utils import ingest, build_bvh, sample_split

The numba kernels compile on first call and are cached on disk.
"""

from .geometry import Geometry, ingest  # noqa: F401
from .split import bounds_cost, evaluate_split, sample_split  # noqa: F401
from .nodes import Node, NodeArray, NodeStore  # noqa: F401
from .stats import BuildStats, StatsAccumulator  # noqa: F401
from .bvh import build_bvh, partition  # noqa: F401

__all__ = [
    "Geometry",
    "ingest",
    "bounds_cost",
    "evaluate_split",
    "sample_split",
    "Node",
    "NodeArray",
    "NodeStore",
    "BuildStats",
    "StatsAccumulator",
    "build_bvh",
    "partition",
]
