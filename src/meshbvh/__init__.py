from .main import BVHResult, build
from .params import BuildParams
from .errors import InvalidInput
from .utils.nodes import Node, NodeArray
from .utils.stats import BuildStats
from .io import (
    pack_triangles,
    pack_nodes,
    unpack_nodes,
    save_mesh_json,
    load_mesh_json,
    save_stats_json,
)

__all__ = [
    "build",
    "BVHResult",
    "BuildParams",
    "InvalidInput",
    "Node",
    "NodeArray",
    "BuildStats",
    "pack_triangles",
    "pack_nodes",
    "unpack_nodes",
    "save_mesh_json",
    "load_mesh_json",
    "save_stats_json",
]
