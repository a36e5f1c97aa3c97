"""A ball tree over space-time points with separate spatial and temporal radii."""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .geometry import spacetime_dist, spatial_dist, temporal_dist
from .tree import Node

Point = tuple[float, float, float]

_DIM = 3
_INT_SIZE = 4
_DOUBLE_SIZE = 8
_PIVOT_TRIALS = 5


@dataclass(eq=False)
class BallNode(Node):
    """A node with a centre and the spatial and temporal radii of its points."""

    center: Point = (0.0, 0.0, 0.0)
    radius_spatial: float = 0.0
    radius_temporal: float = 0.0

    def leaf_matches(
        self,
        q: Sequence[float],
        points: Sequence[Sequence[float]],
        s_bandwidth: float,
        t_bandwidth: float,
    ) -> list[int]:
        """Ids of this node's points within both bandwidths of ``q``."""
        return [
            i
            for i in self.ids
            if spatial_dist(q, points[i]) <= s_bandwidth
            and temporal_dist(q, points[i]) <= t_bandwidth
        ]


class BallTree:
    """A ball tree split around far-apart pivot pairs chosen at random."""

    def __init__(
        self,
        points: Iterable[Sequence[float]],
        leaf_capacity: int = 40,
        seed: int | None = 0,
    ) -> None:
        if leaf_capacity < 1:
            raise ValueError(f"leaf capacity must be positive, got {leaf_capacity}")
        self.points: list[Point] = [
            (float(p[0]), float(p[1]), float(p[2])) for p in points
        ]
        self.leaf_capacity = leaf_capacity
        self._rng = random.Random(seed)
        self.root = self._make_node(list(range(len(self.points))))
        self._build(self.root)

    def _make_node(self, ids: list[int]) -> BallNode:
        if not ids:
            return BallNode(ids=ids)
        count = len(ids)
        center = tuple(sum(self.points[i][d] for i in ids) / count for d in range(_DIM))
        radius_spatial = max(spatial_dist(center, self.points[i]) for i in ids)
        radius_temporal = max(temporal_dist(center, self.points[i]) for i in ids)
        return BallNode(
            ids=ids,
            center=center,
            radius_spatial=radius_spatial,
            radius_temporal=radius_temporal,
        )

    def _divide(self, ids: list[int]) -> tuple[list[int], list[int]]:
        count = len(ids)
        half = count // 2
        pairs = [
            (ids[self._rng.randrange(count)], ids[self._rng.randrange(count)])
            for _ in range(_PIVOT_TRIALS)
        ]
        first, second = max(
            pairs, key=lambda pair: spacetime_dist(self.points[pair[0]], self.points[pair[1]])
        )
        pivot_1, pivot_2 = self.points[first], self.points[second]
        left: list[int] = []
        right: list[int] = []
        for i in ids:
            if len(left) >= half:
                right.append(i)
            elif len(right) >= half:
                left.append(i)
            elif spacetime_dist(self.points[i], pivot_1) < spacetime_dist(
                self.points[i], pivot_2
            ):
                left.append(i)
            else:
                right.append(i)
        return left, right

    def _build(self, node: BallNode) -> None:
        if len(node.ids) <= self.leaf_capacity:
            return
        left_ids, right_ids = self._divide(node.ids)
        left = self._make_node(left_ids)
        right = self._make_node(right_ids)
        self._build(left)
        self._build(right)
        node.children = [left, right]

    def range_search(
        self, q: Sequence[float], s_bandwidth: float, t_bandwidth: float
    ) -> list[int]:
        """Ids of points within ``s_bandwidth`` in space and ``t_bandwidth`` in time of ``q``."""
        result: list[int] = []
        if self.points:
            self._visit(self.root, q, s_bandwidth, t_bandwidth, result)
        return result

    def _visit(
        self,
        node: BallNode,
        q: Sequence[float],
        s_bandwidth: float,
        t_bandwidth: float,
        result: list[int],
    ) -> None:
        s_dist = spatial_dist(q, node.center)
        t_dist = temporal_dist(q, node.center)
        if (
            s_dist + node.radius_spatial <= s_bandwidth
            and t_dist + node.radius_temporal <= t_bandwidth
        ):
            result.extend(node.subtree_ids())
            return
        if (
            s_dist > s_bandwidth + node.radius_spatial
            or t_dist > t_bandwidth + node.radius_temporal
        ):
            return
        if node.is_leaf():
            result.extend(node.leaf_matches(q, self.points, s_bandwidth, t_bandwidth))
            return
        for child in node.children:
            self._visit(child, q, s_bandwidth, t_bandwidth, result)

    def count_space(self) -> int:
        """Approximate memory of the tree in bytes."""
        total = 0
        stack: list[Node] = [self.root]
        while stack:
            node = stack.pop()
            total += len(node.ids) * _INT_SIZE + (_DIM + 2) * _DOUBLE_SIZE
            stack.extend(node.children)
        return total