import numpy as np
import pytest

from meshbvh import InvalidInput
from meshbvh.utils.geometry import face_normals, ingest


V = np.array([
    (0.0, 0.0, 0.0),
    (3.0, 0.0, 0.0),
    (0.0, 3.0, 0.0),
    (0.0, 0.0, 3.0),
], np.float32)
N = np.array([
    (0.0, 0.0, 1.0),
    (0.0, 0.0, 1.0),
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
], np.float32)
IDX = [0, 1, 2, 0, 1, 3]
BOUNDS = ((-1.0, -1.0, -1.0), (4.0, 4.0, 4.0))


def test_triangle_records_and_metadata():
    geo = ingest(V, IDX, N, BOUNDS)
    assert geo.num_triangles == 2
    assert geo.triangles.shape == (2, 6, 3)
    assert geo.triangles.dtype == np.float32
    np.testing.assert_array_equal(geo.triangles[1, :3], V[[0, 1, 3]])
    np.testing.assert_array_equal(geo.triangles[1, 3:], N[[0, 1, 3]])
    np.testing.assert_allclose(geo.centroids[0], (1.0, 1.0, 0.0))
    np.testing.assert_allclose(geo.centroids[1], (1.0, 0.0, 1.0))
    np.testing.assert_array_equal(geo.tri_min[1], (0.0, 0.0, 0.0))
    np.testing.assert_array_equal(geo.tri_max[1], (3.0, 0.0, 3.0))


def test_scene_bounds_are_kept_as_given():
    geo = ingest(V, IDX, N, BOUNDS)
    np.testing.assert_array_equal(geo.bounds_min, BOUNDS[0])
    np.testing.assert_array_equal(geo.bounds_max, BOUNDS[1])


def test_default_bounds_cover_referenced_vertices():
    geo = ingest(V, [0, 1, 2], N)
    np.testing.assert_array_equal(geo.bounds_min, (0.0, 0.0, 0.0))
    np.testing.assert_array_equal(geo.bounds_max, (3.0, 3.0, 0.0))


def test_face_array_input_matches_flat_input():
    flat = ingest(V, IDX, N, BOUNDS)
    faces = ingest(V, np.asarray(IDX, np.int32).reshape(-1, 3), N, BOUNDS)
    np.testing.assert_array_equal(flat.triangles, faces.triangles)


def test_missing_normals_use_face_normals():
    geo = ingest(V, IDX, None, BOUNDS)
    for k in range(3, 6):
        np.testing.assert_allclose(geo.triangles[0, k], (0.0, 0.0, 1.0))
        np.testing.assert_allclose(geo.triangles[1, k], (0.0, -1.0, 0.0))


def test_face_normals_of_degenerate_triangle_are_zero():
    p = np.zeros((1, 3), np.float32)
    n = face_normals(p, p, p)
    np.testing.assert_array_equal(n, np.zeros((1, 3), np.float32))


def test_inputs_are_not_mutated():
    v = V.copy()
    geo = ingest(v, IDX, N, BOUNDS)
    geo.triangles[:] = 0.0
    np.testing.assert_array_equal(v, V)


def test_empty_mesh():
    geo = ingest(np.empty((0, 3), np.float32), [], None)
    assert geo.num_triangles == 0
    assert geo.centroids.shape == (0, 3)


@pytest.mark.parametrize("indices", [
    [0, 1],
    [0, 1, 2, 3],
    [0, 1, 4],
    [0, -1, 2],
    [0.0, 1.0, 2.0],
])
def test_bad_indices_raise(indices):
    with pytest.raises(InvalidInput):
        ingest(V, indices, N, BOUNDS)


def test_bad_vertices_raise():
    with pytest.raises(InvalidInput):
        ingest(np.zeros((4, 2), np.float32), [0, 1, 2], None)


def test_mismatched_normals_raise():
    with pytest.raises(InvalidInput):
        ingest(V, IDX, N[:3], BOUNDS)


@pytest.mark.parametrize("bounds", [
    ((0.0, 0.0, 0.0),),
    ((0.0, 0.0), (1.0, 1.0)),
    ((1.0, 0.0, 0.0), (0.0, 1.0, 1.0)),
    ((0.0, 0.0, 0.0), (np.inf, 1.0, 1.0)),
])
def test_bad_bounds_raise(bounds):
    with pytest.raises(InvalidInput):
        ingest(V, IDX, N, bounds)


def test_invalid_input_is_a_value_error():
    assert issubclass(InvalidInput, ValueError)
