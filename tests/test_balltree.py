import random

import pytest

from stkdv.balltree import BallNode, BallTree
from stkdv.geometry import spatial_dist, temporal_dist


def _points(count, seed):
    rng = random.Random(seed)
    return [
        (rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 5))
        for _ in range(count)
    ]


def _brute(points, q, s, t):
    return sorted(
        i
        for i, p in enumerate(points)
        if spatial_dist(q, p) <= s and temporal_dist(q, p) <= t
    )


def _nodes(tree):
    stack = [tree.root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children)


@pytest.mark.parametrize("capacity, seed", [(1, 0), (5, 1), (40, 2), (1000, 3)])
def test_range_search_matches_brute_force(capacity, seed):
    points = _points(300, 11)
    tree = BallTree(points, capacity, seed)
    rng = random.Random(9)
    for _ in range(20):
        q = (rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 5))
        s = rng.uniform(0.5, 4)
        t = rng.uniform(0.2, 3)
        found = tree.range_search(q, s, t)
        assert len(found) == len(set(found))
        assert sorted(found) == _brute(points, q, s, t)


def test_large_query_returns_all():
    points = _points(80, 12)
    tree = BallTree(points, 4, 0)
    assert sorted(tree.range_search((5.0, 5.0, 2.5), 100.0, 100.0)) == list(range(80))


def test_radii_cover_points():
    points = _points(150, 13)
    tree = BallTree(points, 6, 4)
    for node in _nodes(tree):
        for i in node.ids:
            assert spatial_dist(node.center, points[i]) <= node.radius_spatial + 1e-9
            assert temporal_dist(node.center, points[i]) <= node.radius_temporal + 1e-9


def test_children_partition_parent():
    tree = BallTree(_points(150, 14), 6, 5)
    for node in _nodes(tree):
        if node.children:
            merged = sorted(i for c in node.children for i in c.ids)
            assert merged == sorted(node.ids)
        else:
            assert len(node.ids) <= 6


def test_same_seed_same_tree():
    points = _points(120, 15)
    first = [n.ids for n in _nodes(BallTree(points, 5, 42))]
    second = [n.ids for n in _nodes(BallTree(points, 5, 42))]
    assert first == second


def test_leaf_matches_inclusive():
    points = [(0.5, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 0.0, 1.0)]
    node = BallNode(ids=[0, 1, 2])
    assert node.leaf_matches((0.0, 0.0, 0.0), points, 1.0, 1.0) == [0, 2]


def test_count_space_single_leaf():
    assert BallTree(_points(5, 16), 40, 0).count_space() == 60


def test_count_space_grows_with_depth():
    points = _points(200, 17)
    assert BallTree(points, 4, 0).count_space() > BallTree(points, 1000, 0).count_space()


def test_empty_tree():
    assert BallTree([], 10, 0).range_search((0.0, 0.0, 0.0), 1.0, 1.0) == []


def test_invalid_capacity():
    with pytest.raises(ValueError):
        BallTree(_points(5, 0), 0, 0)