"""Distance helpers for points, bounding boxes and balls.

Points are sequences of coordinates. A box is a sequence of ``(low, high)``
pairs, one per dimension. Functions taking two sequences pair coordinates up
to the shorter of the two.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

Point = Sequence[float]
Box = Sequence[Sequence[float]]


def min_dist_to_box(q: Point, box: Box) -> float:
    """Smallest Euclidean distance from ``q`` to any point of ``box``."""
    total = 0.0
    for coord, (low, high) in zip(q, box):
        if coord < low:
            gap = low - coord
        elif coord > high:
            gap = coord - high
        else:
            gap = 0.0
        total += gap * gap
    return math.sqrt(total)


def max_dist_to_box(q: Point, box: Box) -> float:
    """Largest Euclidean distance from ``q`` to any point of ``box``."""
    total = 0.0
    for coord, (low, high) in zip(q, box):
        gap = max(abs(coord - low), abs(coord - high))
        total += gap * gap
    return math.sqrt(total)


def max_dist_to_ball(q: Point, center: Point, radius: float) -> tuple[float, float]:
    """Return ``(upper_bound, centre_distance)`` from ``q`` to a ball."""
    distance = euclid_dist(q, center)
    return distance + radius, distance


def euclid_dist(q: Point, p: Point) -> float:
    """Euclidean distance between ``q`` and ``p``."""
    return math.sqrt(sq_euclid_dist(q, p))


def sq_euclid_dist(q: Point, p: Point) -> float:
    """Squared Euclidean distance between ``q`` and ``p``."""
    return sum((a - b) * (a - b) for a, b in zip(q, p))


def sq_norm(q: Point) -> float:
    """Squared Euclidean norm of ``q``."""
    return sum(a * a for a in q)


def inner_product(q: Point, p: Point) -> float:
    """Dot product of ``q`` and ``p``."""
    return sum(a * b for a, b in zip(q, p))


def min_dist_box_box(box_1: Box, box_2: Box) -> float:
    """Smallest distance between any two points of two boxes."""
    total = 0.0
    for (low_1, high_1), (low_2, high_2) in zip(box_1, box_2):
        if low_1 > high_2:
            gap = low_1 - high_2
        elif low_2 > high_1:
            gap = low_2 - high_1
        else:
            gap = 0.0
        total += gap * gap
    return math.sqrt(total)


def max_dist_box_box(box_1: Box, box_2: Box) -> float:
    """Largest distance between any two points of two boxes."""
    total = 0.0
    for (low_1, high_1), (low_2, high_2) in zip(box_1, box_2):
        gap = max(abs(high_1 - low_2), abs(high_2 - low_1))
        total += gap * gap
    return math.sqrt(total)


def spatial_dist(q: Point, p: Point) -> float:
    """Distance in the (x, y) plane, ignoring time."""
    return math.hypot(q[0] - p[0], q[1] - p[1])


def temporal_dist(q: Point, p: Point) -> float:
    """Absolute difference of the timestamps."""
    return abs(q[2] - p[2])


def spacetime_dist(q: Point, p: Point) -> float:
    """Euclidean distance over (x, y, t)."""
    return math.sqrt(
        (q[0] - p[0]) ** 2 + (q[1] - p[1]) ** 2 + (q[2] - p[2]) ** 2
    )