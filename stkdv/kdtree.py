"""A kd-tree over space-time points answering axis-aligned range queries."""

from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum

from .tree import Node

Point = tuple[float, float, float]
Box = tuple[tuple[float, float], ...]

_DIM = 3
_INT_SIZE = 4
_DOUBLE_SIZE = 8


class Relation(IntEnum):
    """How a query box relates to a node's bounding box."""

    COVER = 0
    INTERSECT = 1
    DISJOINT = 2


def query_box(q: Sequence[float], s_bandwidth: float, t_bandwidth: float) -> Box:
    """Box of half-widths ``s_bandwidth`` in x and y and ``t_bandwidth`` in t around ``q``."""
    return (
        (q[0] - s_bandwidth, q[0] + s_bandwidth),
        (q[1] - s_bandwidth, q[1] + s_bandwidth),
        (q[2] - t_bandwidth, q[2] + t_bandwidth),
    )


@dataclass(eq=False)
class KDNode(Node):
    """A kd-tree node with the bounding box of its points."""

    boundary: Box = ()

    def relation(self, box: Sequence[Sequence[float]]) -> Relation:
        """Whether ``box`` covers, intersects or misses this node's bounding box."""
        condition = Relation.COVER
        for (q_low, q_high), (b_low, b_high) in zip(box, self.boundary):
            current = Relation.DISJOINT
            if q_low <= b_low and b_high <= q_high:
                current = Relation.COVER
            if b_low <= q_low and q_high <= b_high:
                current = Relation.INTERSECT
            if q_low <= b_low <= q_high <= b_high:
                current = Relation.INTERSECT
            if b_low <= q_low <= b_high <= q_high:
                current = Relation.INTERSECT
            if current is Relation.DISJOINT:
                return Relation.DISJOINT
            if current is Relation.INTERSECT:
                condition = Relation.INTERSECT
        return condition

    def leaf_matches(
        self, box: Sequence[Sequence[float]], points: Sequence[Sequence[float]]
    ) -> list[int]:
        """Ids of this node's points lying inside ``box``, bounds included."""
        return [
            i
            for i in self.ids
            if all(low <= coord <= high for coord, (low, high) in zip(points[i], box))
        ]


class KDTree:
    """A kd-tree splitting at the median, cycling through x, y and t."""

    def __init__(
        self, points: Iterable[Sequence[float]], leaf_capacity: int = 40
    ) -> None:
        if leaf_capacity < 1:
            raise ValueError(f"leaf capacity must be positive, got {leaf_capacity}")
        self.points: list[Point] = [
            (float(p[0]), float(p[1]), float(p[2])) for p in points
        ]
        self.leaf_capacity = leaf_capacity
        self.root = self._make_node(list(range(len(self.points))))
        self._build(self.root, 0)

    def _make_node(self, ids: list[int]) -> KDNode:
        if ids:
            boundary = tuple(
                (
                    min(self.points[i][d] for i in ids),
                    max(self.points[i][d] for i in ids),
                )
                for d in range(_DIM)
            )
        else:
            boundary = ((math.inf, -math.inf),) * _DIM
        return KDNode(ids=ids, boundary=boundary)

    def _build(self, node: KDNode, dim: int) -> None:
        if len(node.ids) <= self.leaf_capacity:
            return
        split = statistics.median(self.points[i][dim] for i in node.ids)
        half = len(node.ids) // 2
        left_ids: list[int] = []
        right_ids: list[int] = []
        for i in node.ids:
            if self.points[i][dim] <= split and len(left_ids) <= half:
                left_ids.append(i)
            else:
                right_ids.append(i)
        if not left_ids or not right_ids:
            return
        left = self._make_node(left_ids)
        right = self._make_node(right_ids)
        next_dim = (dim + 1) % _DIM
        self._build(left, next_dim)
        self._build(right, next_dim)
        node.children = [left, right]

    def range_search(self, box: Sequence[Sequence[float]]) -> list[int]:
        """Ids of all points inside ``box``, bounds included."""
        box = tuple((float(low), float(high)) for low, high in box)
        relation = self.root.relation(box)
        if relation is Relation.COVER:
            return self.root.subtree_ids()
        result: list[int] = []
        if relation is Relation.INTERSECT:
            self._search(self.root, box, result)
        return result

    def _search(self, node: KDNode, box: Box, result: list[int]) -> None:
        if node.is_leaf():
            result.extend(node.leaf_matches(box, self.points))
            return
        for child in node.children:
            relation = child.relation(box)
            if relation is Relation.COVER:
                result.extend(child.subtree_ids())
            elif relation is Relation.INTERSECT:
                self._search(child, box, result)

    def count_space(self) -> int:
        """Approximate memory of the tree in bytes."""
        total = 0
        stack: list[Node] = [self.root]
        while stack:
            node = stack.pop()
            total += len(node.ids) * _INT_SIZE + _DIM * 2 * _DOUBLE_SIZE
            stack.extend(node.children)
        return total