import math

import numpy as np
import pytest


def gen_sphere(lat_n: int, lon_n: int, radius: float = 1.0):
    """Return (V, F, N) of a UV sphere with shared vertices and outward normals."""
    verts = []
    for i in range(lat_n + 1):
        phi = math.pi * i / lat_n
        for j in range(lon_n):
            th = 2 * math.pi * j / lon_n
            verts.append((
                math.sin(phi) * math.cos(th),
                math.sin(phi) * math.sin(th),
                math.cos(phi),
            ))
    V = np.asarray(verts, np.float32) * radius
    N = np.asarray(verts, np.float32)

    faces = []
    for i in range(lat_n):
        for j in range(lon_n):
            a = i * lon_n + j
            b = i * lon_n + (j + 1) % lon_n
            c = (i + 1) * lon_n + j
            d = (i + 1) * lon_n + (j + 1) % lon_n
            faces.append((a, c, b))
            faces.append((b, c, d))
    F = np.asarray(faces, np.int32)
    return V, F, N


def gen_grid(n: int, z: float = 0.0):
    """Return (V, F) of an n x n quad grid in the plane z, two triangles per quad."""
    xs = np.arange(n + 1, dtype=np.float32)
    gx, gy = np.meshgrid(xs, xs, indexing="ij")
    V = np.stack([gx.ravel(), gy.ravel(), np.full(gx.size, z, np.float32)], axis=1)
    faces = []
    for i in range(n):
        for j in range(n):
            a = i * (n + 1) + j
            b = (i + 1) * (n + 1) + j
            faces.append((a, b, b + 1))
            faces.append((a, b + 1, a + 1))
    return V.astype(np.float32), np.asarray(faces, np.int32)


def mesh_bounds(V):
    return V.min(axis=0), V.max(axis=0)


@pytest.fixture
def sphere():
    return gen_sphere(12, 24)


@pytest.fixture
def grid():
    return gen_grid(8)


@pytest.fixture
def diamond():
    """Two triangles forming a quad rotated 45 degrees in the xy plane."""
    V = np.array([
        (1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (-1.0, 0.0, 0.0),
        (0.0, -1.0, 0.0),
    ], np.float32)
    F = np.array([[0, 1, 2], [0, 2, 3]], np.int32)
    return V, F
