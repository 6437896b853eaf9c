from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class BuildStats:
    """Summary of one finished build. Means are ``nan`` when there are no leaves."""
    time_ms: float
    triangles: int
    node_count: int
    leaf_count: int
    depth_min: int
    depth_max: int
    depth_mean: float
    leaf_tri_min: int
    leaf_tri_max: int
    leaf_tri_mean: float

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        return (
            f"Time (ms): {self.time_ms:.3f}\n"
            f"Triangles: {self.triangles}\n"
            f"Node Count: {self.node_count}\n"
            f"Leaf Count: {self.leaf_count}\n"
            f"Leaf Depth:\n"
            f" - Min: {self.depth_min}\n"
            f" - Max: {self.depth_max}\n"
            f" - Mean: {self.depth_mean:.3f}\n"
            f"Leaf Triangles:\n"
            f" - Min: {self.leaf_tri_min}\n"
            f" - Max: {self.leaf_tri_max}\n"
            f" - Mean: {self.leaf_tri_mean:.3f}"
        )


class StatsAccumulator:
    """Running leaf aggregates, passed explicitly through the recursion."""

    def __init__(self):
        self.leaf_count = 0
        self.depth_min = math.inf
        self.depth_max = -math.inf
        self.depth_sum = 0
        self.leaf_tri_min = math.inf
        self.leaf_tri_max = -math.inf
        self.leaf_tri_sum = 0

    def record_leaf(self, depth: int, count: int) -> None:
        self.leaf_count += 1
        self.depth_min = min(self.depth_min, depth)
        self.depth_max = max(self.depth_max, depth)
        self.depth_sum += depth
        self.leaf_tri_min = min(self.leaf_tri_min, count)
        self.leaf_tri_max = max(self.leaf_tri_max, count)
        self.leaf_tri_sum += count

    def finalize(self, time_ms: float, triangles: int, node_count: int) -> BuildStats:
        if self.leaf_count == 0:
            return BuildStats(
                time_ms=float(time_ms),
                triangles=int(triangles),
                node_count=int(node_count),
                leaf_count=0,
                depth_min=0,
                depth_max=0,
                depth_mean=math.nan,
                leaf_tri_min=0,
                leaf_tri_max=0,
                leaf_tri_mean=math.nan,
            )
        return BuildStats(
            time_ms=float(time_ms),
            triangles=int(triangles),
            node_count=int(node_count),
            leaf_count=self.leaf_count,
            depth_min=int(self.depth_min),
            depth_max=int(self.depth_max),
            depth_mean=self.depth_sum / self.leaf_count,
            leaf_tri_min=int(self.leaf_tri_min),
            leaf_tri_max=int(self.leaf_tri_max),
            leaf_tri_mean=self.leaf_tri_sum / self.leaf_count,
        )


__all__ = ["BuildStats", "StatsAccumulator"]
