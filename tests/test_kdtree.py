import random

import pytest

from stkdv.kdtree import KDNode, KDTree, Relation, query_box


def _points(count, seed):
    rng = random.Random(seed)
    return [
        (rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 5))
        for _ in range(count)
    ]


def _brute(points, box):
    return sorted(
        i
        for i, p in enumerate(points)
        if all(low <= c <= high for c, (low, high) in zip(p, box))
    )


def test_query_box():
    assert query_box((1.0, 2.0, 3.0), 0.5, 1.0) == (
        (0.5, 1.5),
        (1.5, 2.5),
        (2.0, 4.0),
    )


UNIT = ((0.0, 1.0), (0.0, 1.0), (0.0, 1.0))


@pytest.mark.parametrize(
    "box, expected",
    [
        (((-1, 2), (-1, 2), (-1, 2)), Relation.COVER),
        (((0.5, 2), (-1, 2), (-1, 2)), Relation.INTERSECT),
        (((0.2, 0.8), (0.2, 0.8), (0.2, 0.8)), Relation.INTERSECT),
        (((2, 3), (-1, 2), (-1, 2)), Relation.DISJOINT),
        (((-1, 2), (-1, 2), (5, 6)), Relation.DISJOINT),
    ],
)
def test_relation(box, expected):
    node = KDNode(ids=[0], boundary=UNIT)
    assert node.relation(box) is expected


def test_leaf_matches_inclusive():
    points = [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (2.0, 2.0, 2.0)]
    node = KDNode(ids=[0, 1, 2], boundary=((0, 2),) * 3)
    assert node.leaf_matches(UNIT, points) == [0, 1]


@pytest.mark.parametrize("capacity", [1, 4, 40, 1000])
def test_range_search_matches_brute_force(capacity):
    points = _points(300, 1)
    tree = KDTree(points, capacity)
    rng = random.Random(7)
    for _ in range(20):
        q = (rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 5))
        box = query_box(q, rng.uniform(0.5, 3), rng.uniform(0.2, 2))
        found = tree.range_search(box)
        assert len(found) == len(set(found))
        assert sorted(found) == _brute(points, box)


def test_whole_space_returns_all():
    points = _points(100, 2)
    tree = KDTree(points, 5)
    assert sorted(tree.range_search(((-1, 11), (-1, 11), (-1, 6)))) == list(range(100))


def test_far_box_is_empty():
    tree = KDTree(_points(100, 3), 5)
    assert tree.range_search(((20, 30), (20, 30), (20, 30))) == []


def test_duplicate_points_build_and_search():
    points = [(1.0, 1.0, 1.0)] * 10
    tree = KDTree(points, 1)
    assert sorted(tree.range_search(UNIT)) == list(range(10))


def test_children_partition_parent():
    tree = KDTree(_points(200, 4), 8)
    stack = [tree.root]
    while stack:
        node = stack.pop()
        if node.children:
            merged = sorted(i for c in node.children for i in c.ids)
            assert merged == sorted(node.ids)
        else:
            assert len(node.ids) <= 8
        stack.extend(node.children)


def test_count_space_single_leaf():
    tree = KDTree(_points(5, 5), 40)
    assert tree.count_space() == 68


def test_count_space_grows_with_depth():
    points = _points(200, 6)
    assert KDTree(points, 4).count_space() > KDTree(points, 1000).count_space()


def test_empty_tree():
    assert KDTree([], 10).range_search(UNIT) == []


def test_invalid_capacity():
    with pytest.raises(ValueError):
        KDTree(_points(5, 0), 0)