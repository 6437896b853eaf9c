from __future__ import annotations

import logging
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidInput

logger = logging.getLogger(__name__)

BoundsLike = Tuple[Sequence[float], Sequence[float]]


class Geometry(NamedTuple):
    """Triangle soup plus the index-aligned metadata used while splitting.

    ``triangles[i]``, ``centroids[i]``, ``tri_min[i]`` and ``tri_max[i]``
    always describe the same triangle; the partitioner swaps all four
    together.
    """
    triangles: np.ndarray   # float32 (M, 6, 3): 3 positions then 3 normals
    centroids: np.ndarray   # float32 (M, 3)
    tri_min: np.ndarray     # float32 (M, 3)
    tri_max: np.ndarray     # float32 (M, 3)
    bounds_min: np.ndarray  # float32 (3,)
    bounds_max: np.ndarray  # float32 (3,)

    @property
    def num_triangles(self) -> int:
        return int(self.triangles.shape[0])


def _tri_bounds(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray):
    bmin = np.minimum(np.minimum(p0, p1), p2)
    bmax = np.maximum(np.maximum(p0, p1), p2)
    centroid = (p0 + p1 + p2) / 3.0
    return bmin.astype(np.float32), bmax.astype(np.float32), centroid.astype(np.float32)


def face_normals(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    """Unit geometric normals ``cross(p1 - p0, p2 - p0)``; zero for degenerate faces."""
    n = np.cross(p1 - p0, p2 - p0).astype(np.float64)
    length = np.linalg.norm(n, axis=1, keepdims=True)
    out = np.zeros_like(n)
    np.divide(n, length, out=out, where=length > 0.0)
    return out.astype(np.float32)


def _as_indices(indices, n_vertices: int) -> np.ndarray:
    idx = np.asarray(indices)
    if idx.size == 0:
        return np.empty((0, 3), np.int64)
    if not np.issubdtype(idx.dtype, np.integer):
        raise InvalidInput(f"indices must be integers (got dtype {idx.dtype})")
    idx = idx.reshape(-1)
    if idx.size % 3 != 0:
        raise InvalidInput(
            f"index count must be a multiple of 3 (got {idx.size})"
        )
    lo = int(idx.min())
    hi = int(idx.max())
    if lo < 0 or hi >= n_vertices:
        raise InvalidInput(
            f"vertex index out of range [0, {n_vertices}) (got min={lo}, max={hi})"
        )
    return idx.astype(np.int64).reshape(-1, 3)


def _as_bounds(scene_bounds: BoundsLike):
    try:
        bmin, bmax = scene_bounds
    except (TypeError, ValueError):
        raise InvalidInput("scene_bounds must be a (min, max) pair of 3-vectors")
    bmin = np.asarray(bmin, dtype=np.float32)
    bmax = np.asarray(bmax, dtype=np.float32)
    if bmin.shape != (3,) or bmax.shape != (3,):
        raise InvalidInput("scene_bounds corners must have shape (3,)")
    if not (np.all(np.isfinite(bmin)) and np.all(np.isfinite(bmax))):
        raise InvalidInput("scene_bounds must be finite")
    if np.any(bmin > bmax):
        raise InvalidInput(f"scene_bounds min {bmin.tolist()} exceeds max {bmax.tolist()}")
    return bmin, bmax


def ingest(
    vertices,
    indices,
    normals=None,
    scene_bounds: Optional[BoundsLike] = None,
) -> Geometry:
    """Turn vertex/index/normal arrays into a :class:`Geometry`.

    Parameters
    ----------
    vertices : array-like (V, 3)
        Vertex positions.
    indices : array-like
        Flat index list (stride 3) or an (M, 3) face array.
    normals : array-like (V, 3), optional
        Per-vertex normals. When omitted each triangle uses its face normal
        on all three corners.
    scene_bounds : (min, max), optional
        Root box. Kept as given, so it may be looser than the triangles.
        Defaults to the bounds of the referenced vertices.

    Raises
    ------
    InvalidInput
        On any malformed array; no partial result is produced.
    """
    V = np.asarray(vertices, dtype=np.float32)
    if V.size == 0:
        V = V.reshape(0, 3)
    if V.ndim != 2 or V.shape[1] != 3:
        raise InvalidInput(f"vertices must have shape (N,3) (got {V.shape})")

    faces = _as_indices(indices, V.shape[0])
    m = faces.shape[0]

    if normals is not None:
        N = np.asarray(normals, dtype=np.float32)
        if N.size == 0:
            N = N.reshape(0, 3)
        if N.shape != V.shape:
            raise InvalidInput(
                f"normals must match vertices shape {V.shape} (got {N.shape})"
            )

    if scene_bounds is not None:
        bounds_min, bounds_max = _as_bounds(scene_bounds)
    elif m:
        used = V[faces.reshape(-1)]
        bounds_min = used.min(axis=0).astype(np.float32)
        bounds_max = used.max(axis=0).astype(np.float32)
    else:
        bounds_min = np.zeros(3, np.float32)
        bounds_max = np.zeros(3, np.float32)

    p0 = V[faces[:, 0]]
    p1 = V[faces[:, 1]]
    p2 = V[faces[:, 2]]

    triangles = np.empty((m, 6, 3), np.float32)
    triangles[:, 0] = p0
    triangles[:, 1] = p1
    triangles[:, 2] = p2
    if normals is not None:
        triangles[:, 3] = N[faces[:, 0]]
        triangles[:, 4] = N[faces[:, 1]]
        triangles[:, 5] = N[faces[:, 2]]
    else:
        fn = face_normals(p0, p1, p2)
        triangles[:, 3] = fn
        triangles[:, 4] = fn
        triangles[:, 5] = fn

    tri_min, tri_max, centroids = _tri_bounds(p0, p1, p2)

    logger.debug("Ingested %d triangles from %d vertices", m, V.shape[0])
    return Geometry(
        triangles=triangles,
        centroids=np.ascontiguousarray(centroids),
        tri_min=np.ascontiguousarray(tri_min),
        tri_max=np.ascontiguousarray(tri_max),
        bounds_min=bounds_min,
        bounds_max=bounds_max,
    )


__all__ = ["Geometry", "ingest", "face_normals"]
