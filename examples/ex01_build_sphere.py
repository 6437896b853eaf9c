import logging
import math
import sys

import numpy as np

from meshbvh import build, pack_nodes, pack_triangles


def gen_sphere(lat_n: int, lon_n: int, radius: float = 1.0):
    """Return (V, F, N) of a UV sphere with outward normals."""
    verts = []
    for i in range(lat_n + 1):
        phi = math.pi * i / lat_n
        for j in range(lon_n):
            th = 2 * math.pi * j / lon_n
            verts.append((math.sin(phi) * math.cos(th),
                          math.sin(phi) * math.sin(th),
                          math.cos(phi)))
    N = np.asarray(verts, np.float32)
    faces = []
    for i in range(lat_n):
        for j in range(lon_n):
            a = i * lon_n + j
            b = i * lon_n + (j + 1) % lon_n
            faces.append((a, a + lon_n, b))
            faces.append((b, a + lon_n, b + lon_n))
    return N * radius, np.asarray(faces, np.int32), N


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stdout,
                        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    V, F, N = gen_sphere(64, 128)
    print(f"Generated {F.shape[0]} triangles.")

    for leaf_threshold in (1, 4, 16):
        tris, nodes, stats = build(V, F, N, (V.min(axis=0), V.max(axis=0)),
                                   max_depth=16, leaf_threshold=leaf_threshold)
        print(f"leaf_threshold={leaf_threshold}")
        print(stats.summary())
        print(f"GPU buffers: {len(pack_triangles(tris)):,d} B triangles, "
              f"{len(pack_nodes(nodes)):,d} B nodes")
        print("-------------")
