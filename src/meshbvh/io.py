from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .utils.nodes import NodeArray
from .utils.stats import BuildStats


MeshTuple = Tuple[np.ndarray, np.ndarray, Optional[np.ndarray]]

# GPU buffer records, little-endian with no padding.
TRIANGLE_DTYPE = np.dtype([
    ("vertices", "<f4", (3, 3)),
    ("normals", "<f4", (3, 3)),
])
NODE_DTYPE = np.dtype([
    ("bounds_min", "<f4", (3,)),
    ("bounds_max", "<f4", (3,)),
    ("start_index", "<u4"),
    ("num_triangles", "<u4"),
])


# ---------------------------------------------------------------
# Binary records
# ---------------------------------------------------------------

def pack_triangles(triangles: np.ndarray) -> bytes:
    """Return the 72-byte-per-triangle buffer for a built triangle array."""
    tris = np.asarray(triangles, dtype=np.float32)
    if tris.ndim != 3 or tris.shape[1:] != (6, 3):
        raise ValueError(f"triangles must have shape (M,6,3) (got {tris.shape})")
    out = np.empty(tris.shape[0], TRIANGLE_DTYPE)
    out["vertices"] = tris[:, :3]
    out["normals"] = tris[:, 3:]
    return out.tobytes()


def pack_nodes(nodes: NodeArray) -> bytes:
    """Return the 32-byte-per-node buffer in the packed encoding.

    Internal nodes store the index of their first child in ``start_index``
    (the second child follows it) and ``num_triangles == 0``. Leaves store
    their triangle range. Apart from the root of an empty mesh the builder
    never emits an empty leaf, so ``num_triangles == 0`` marks an internal
    node.
    """
    n = len(nodes)
    out = np.zeros(n, NODE_DTYPE)
    out["bounds_min"] = nodes.bounds_min
    out["bounds_max"] = nodes.bounds_max
    leaf = nodes.child_a < 0
    out["start_index"] = np.where(leaf, nodes.start_index, nodes.child_a).astype(np.uint32)
    out["num_triangles"] = np.where(
        leaf, nodes.end_index - nodes.start_index, 0
    ).astype(np.uint32)
    return out.tobytes()


def unpack_nodes(data: bytes) -> np.ndarray:
    """View a packed node buffer as a structured array of ``NODE_DTYPE``."""
    if len(data) % NODE_DTYPE.itemsize != 0:
        raise ValueError(
            f"node buffer length {len(data)} is not a multiple of {NODE_DTYPE.itemsize}"
        )
    return np.frombuffer(data, dtype=NODE_DTYPE)


# ---------------------------------------------------------------
# Mesh geometry JSON IO
# ---------------------------------------------------------------

def _json_path(save_path: str) -> Path:
    path = Path(save_path)
    if path.suffix.lower() == "":
        path = path.with_suffix(".json")
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_mesh_json(vertices, indices, normals=None, save_path: str = "mesh.json") -> str:
    """Save a triangle mesh to a JSON file.

    The JSON structure is:
        {"vertices": [[x,y,z], ...],
         "normals": [[x,y,z], ...] or null,
         "faces": [[i,j,k], ...]}
    """
    V = np.asarray(vertices, dtype=np.float32).reshape(-1, 3)
    F = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    payload = {
        "vertices": V.tolist(),
        "normals": None,
        "faces": F.tolist(),
    }
    if normals is not None:
        N = np.asarray(normals, dtype=np.float32).reshape(-1, 3)
        if N.shape != V.shape:
            raise ValueError(f"normals must match vertices shape {V.shape} (got {N.shape})")
        payload["normals"] = N.tolist()

    path = _json_path(save_path)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)

    return str(path.resolve())


def load_mesh_json(load_path: str) -> MeshTuple:
    """Load a mesh saved by save_mesh_json.

    Returns ``(V, F, N)`` with V float32[N,3], F int32[M,3] and N float32[N,3]
    or ``None`` when the file stores no normals.
    """
    path = Path(load_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {load_path}")

    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    if not isinstance(data, dict) or "vertices" not in data or "faces" not in data:
        raise TypeError("Invalid mesh JSON: expected an object with 'vertices' and 'faces'")

    V = np.asarray(data["vertices"], dtype=np.float32)
    F = np.asarray(data["faces"], dtype=np.int32)
    if V.size == 0:
        V = V.reshape(0, 3)
    if F.size == 0:
        F = F.reshape(0, 3)
    if V.ndim != 2 or V.shape[1] != 3:
        raise ValueError("vertices must have shape (N,3)")
    if F.ndim != 2 or F.shape[1] != 3:
        raise ValueError("faces must have shape (M,3) of triangles")

    N = data.get("normals")
    if N is not None:
        N = np.asarray(N, dtype=np.float32)
        if N.size == 0:
            N = N.reshape(0, 3)
        if N.shape != V.shape:
            raise ValueError("normals must have the same shape as vertices")

    return V, F, N


def save_stats_json(stats: BuildStats, save_path: str) -> str:
    """Save build statistics to a JSON file; undefined means are written as null."""
    cleaned = {}
    for key, val in stats.as_dict().items():
        if isinstance(val, float) and math.isnan(val):
            val = None
        cleaned[key] = val

    path = _json_path(save_path)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(cleaned, fh, ensure_ascii=False, indent=2, sort_keys=True)

    return str(path.resolve())


__all__ = [
    "TRIANGLE_DTYPE",
    "NODE_DTYPE",
    "pack_triangles",
    "pack_nodes",
    "unpack_nodes",
    "save_mesh_json",
    "load_mesh_json",
    "save_stats_json",
]
