import numpy as np
import pytest

from meshbvh.utils.nodes import NO_CHILD, NodeStore

ZERO = np.zeros(3, np.float32)
ONE = np.ones(3, np.float32)


def test_append_returns_sequential_indices_and_grows():
    store = NodeStore(capacity=2)
    idx = [store.append(ZERO, ONE, i, i + 1) for i in range(9)]
    assert idx == list(range(9))
    assert len(store) == 9
    assert store.capacity >= 9
    node = store.get(7)
    assert node.start_index == 7 and node.end_index == 8
    assert node.is_leaf
    assert node.child_a == NO_CHILD and node.child_b == NO_CHILD


def test_set_children_once():
    store = NodeStore(capacity=4)
    root = store.append(ZERO, ONE, 0, 4)
    a = store.append(ZERO, ONE, 0, 2)
    b = store.append(ZERO, ONE, 2, 4)
    store.set_children(root, a, b)
    node = store.get(root)
    assert not node.is_leaf
    assert node.num_triangles == 0
    assert (node.child_a, node.child_b) == (1, 2)
    with pytest.raises(RuntimeError):
        store.set_children(root, a, b)


def test_get_out_of_range():
    store = NodeStore()
    store.append(ZERO, ONE, 0, 0)
    with pytest.raises(IndexError):
        store.get(1)
    with pytest.raises(IndexError):
        store.get(-1)


def test_get_returns_a_copy_unaffected_by_growth():
    store = NodeStore(capacity=1)
    store.append(ZERO, ONE, 0, 3)
    first = store.get(0)
    for i in range(10):
        store.append(ONE, ONE, 0, 0)
    np.testing.assert_array_equal(first.bounds_max, ONE)
    np.testing.assert_array_equal(store.get(0).bounds_min, ZERO)


def test_freeze_is_read_only():
    store = NodeStore(capacity=8)
    store.append(ZERO, ONE, 0, 2)
    store.append(ZERO, ONE, 0, 1)
    store.append(ZERO, ONE, 1, 2)
    store.set_children(0, 1, 2)
    nodes = store.freeze()
    assert len(nodes) == 3
    assert nodes.start_index.shape == (3,)
    with pytest.raises(ValueError):
        nodes.child_a[0] = 5
    assert nodes.leaves() == [1, 2]
    assert [n for n, _ in nodes.walk()] == [0, 1, 2]
    assert list(nodes.walk(max_depth=0)) == [(0, 0)]
    assert nodes.num_triangles(0) == 0
    assert nodes.num_triangles(2) == 1
