from __future__ import annotations
import logging
import numbers
import time
from typing import NamedTuple, Optional

import numpy as np

from .errors import InvalidInput
from .params import BuildParams
from .utils.bvh import build_bvh
from .utils.geometry import BoundsLike, ingest
from .utils.nodes import NodeArray
from .utils.stats import BuildStats

logger = logging.getLogger(__name__)

# the builder recurses once per level
MAX_DEPTH_LIMIT = 256


class BVHResult(NamedTuple):
    triangles: np.ndarray
    nodes: NodeArray
    stats: BuildStats


def _check_count(name: str, value, limit: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidInput(f"{name} must be an integer (got {value!r})")
    if value < 0:
        raise InvalidInput(f"{name} must be >= 0 (got {value})")
    if limit is not None and value > limit:
        raise InvalidInput(f"{name} must be <= {limit} (got {value})")
    return int(value)


def build(
    vertices,
    indices,
    normals=None,
    scene_bounds: Optional[BoundsLike] = None,
    *,
    max_depth: int = 16,
    leaf_threshold: int = 4,
    params: Optional[BuildParams] = None,
) -> BVHResult:
    """Build a bounding volume hierarchy over a triangle mesh.

    Parameters
    ----------
    vertices : array-like (V, 3)
        Vertex positions.
    indices : array-like
        Triangle vertex indices, flat (length multiple of 3) or (M, 3).
    normals : array-like (V, 3), optional
        Per-vertex normals copied into each triangle record. Face normals are
        used when omitted.
    scene_bounds : (min, max), optional
        Root bounding box. Defaults to the bounds of the mesh.
    max_depth : int, optional
        Recursion cap, root at depth 0. Default 16, at most
        ``MAX_DEPTH_LIMIT`` (256).
    leaf_threshold : int, optional
        Ranges with this many triangles or fewer are not split. Default 4.
    params : BuildParams, optional
        Overrides ``max_depth`` and ``leaf_threshold`` when given.

    Returns
    -------
    BVHResult
        ``(triangles, nodes, stats)``. ``triangles`` is a read-only
        float32 (M, 6, 3) array reordered so every leaf owns a contiguous
        range; ``nodes[0]`` is the root.

    Raises
    ------
    InvalidInput
        Malformed arrays or parameters. Raised before any node is created.
    """
    t_start = time.perf_counter()
    if params is not None:
        max_depth = params.max_depth
        leaf_threshold = params.leaf_threshold
    max_depth = _check_count("max_depth", max_depth, MAX_DEPTH_LIMIT)
    leaf_threshold = _check_count("leaf_threshold", leaf_threshold)

    geometry = ingest(vertices, indices, normals, scene_bounds)
    logger.debug(
        "Building BVH over %d triangles (max_depth=%d, leaf_threshold=%d)",
        geometry.num_triangles, max_depth, leaf_threshold,
    )
    triangles, nodes, stats = build_bvh(
        geometry, max_depth=max_depth, leaf_threshold=leaf_threshold, t_start=t_start,
    )
    return BVHResult(triangles, nodes, stats)


__all__ = ["BVHResult", "build"]
