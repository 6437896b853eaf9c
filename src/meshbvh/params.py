from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass
class BuildParams:
    """Configuration for a single BVH build.

    Parameters
    ----------
    max_depth : int
        Hard recursion cap. The root sits at depth 0, so ``max_depth=0``
        always yields a single leaf. Must be finite to bound the build on
        pathological input. Values above 256 are rejected.
    leaf_threshold : int
        Ranges holding this many triangles or fewer become leaves without
        evaluating a split. ``1`` only stops on single triangles.
    """
    max_depth: int = 16
    leaf_threshold: int = 4

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["BuildParams"]
