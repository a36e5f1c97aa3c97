"""Bucket sweep computing Epanechnikov statistical planes for a time window.

For a window of points and each grid row ``y = k`` the sweep yields, for every
grid column and ``u`` in 0, 1, 2, the sum over window points ``p`` of
``(1 - |q - p|^2 / b_s^2) * t_p^u`` restricted to points within ``b_s`` of
``q``. The temporal kernel is then applied from these moments.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from .dataset import Grid

Point = Sequence[float]

_MOMENTS = 3


@dataclass(frozen=True)
class BoundEntry:
    """One end of the x-interval in which a point lies within the bandwidth of a row."""

    point_id: int
    bound_value: float
    is_lower: bool

    def __lt__(self, other: BoundEntry) -> bool:
        return self.bound_value < other.bound_value


def envelope_points(
    points: Sequence[Point], start: int, end: int, k: float, s_bandwidth: float
) -> list[int]:
    """Ids in ``start..end`` (inclusive) whose y lies strictly within ``s_bandwidth`` of ``k``."""
    first = max(start, 0)
    last = min(end, len(points) - 1)
    return [i for i in range(first, last + 1) if abs(points[i][1] - k) < s_bandwidth]


def bound_list(
    points: Sequence[Point], ids: Sequence[int], k: float, s_bandwidth: float
) -> list[BoundEntry]:
    """Lower and upper x-bounds of the bandwidth circle of each point cut at ``y = k``."""
    entries: list[BoundEntry] = []
    for i in ids:
        x, y = points[i][0], points[i][1]
        half_width = math.sqrt(s_bandwidth * s_bandwidth - (k - y) * (k - y))
        entries.append(BoundEntry(i, x - half_width, True))
        entries.append(BoundEntry(i, x + half_width, False))
    return entries


def _accumulate(
    points: Sequence[Point], ids: list[int], bins: list[int], n_x: int
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Running sums of ``t^u``, ``t^u x``, ``t^u y`` and ``t^u |p|^2`` over columns."""
    coords = np.asarray([points[i] for i in ids], dtype=float).reshape(-1, 3)
    bin_array = np.asarray(bins, dtype=int)
    powers = coords[:, 2][None, :] ** np.arange(_MOMENTS)[:, None]
    sq_norms = coords[:, 0] ** 2 + coords[:, 1] ** 2

    def running(weights: np.ndarray) -> np.ndarray:
        counts = np.bincount(bin_array, weights=weights, minlength=n_x + 1)
        return np.cumsum(counts)[:n_x]

    count = np.array([running(powers[u]) for u in range(_MOMENTS)])
    sum_x = np.array([running(powers[u] * coords[:, 0]) for u in range(_MOMENTS)])
    sum_y = np.array([running(powers[u] * coords[:, 1]) for u in range(_MOMENTS)])
    sum_sq = np.array([running(powers[u] * sq_norms) for u in range(_MOMENTS)])
    return count, sum_x, sum_y, sum_sq


def bucket_row(
    points: Sequence[Point],
    start: int,
    end: int,
    k: float,
    grid: Grid,
    s_bandwidth: float,
) -> np.ndarray:
    """Statistical terms of shape ``(3, n_x)`` for the grid row at ``y = k``."""
    n_x = grid.n_x
    result = np.zeros((_MOMENTS, n_x))
    ids = envelope_points(points, start, end, k, s_bandwidth)
    if not ids:
        return result

    x_low = grid.region.x_low
    incr_x = grid.incr_x

    def column(value: float) -> int:
        return min(max(math.ceil((value - x_low) / incr_x), 0), n_x)

    lower_ids: list[int] = []
    lower_bins: list[int] = []
    upper_ids: list[int] = []
    upper_bins: list[int] = []
    for entry in bound_list(points, ids, k, s_bandwidth):
        if entry.is_lower:
            lower_ids.append(entry.point_id)
            lower_bins.append(column(entry.bound_value))
        else:
            upper_ids.append(entry.point_id)
            upper_bins.append(column(entry.bound_value))

    low = _accumulate(points, lower_ids, lower_bins, n_x)
    high = _accumulate(points, upper_ids, upper_bins, n_x)
    count, sum_x, sum_y, sum_sq = (a - b for a, b in zip(low, high))

    bandwidth_sq = s_bandwidth * s_bandwidth
    qx = x_low + np.arange(n_x) * incr_x
    q_sq = qx * qx + k * k
    return (
        (1.0 - q_sq / bandwidth_sq) * count
        + (2.0 / bandwidth_sq) * (qx * sum_x + k * sum_y)
        - sum_sq / bandwidth_sq
    )


def bucket_planes(
    points: Sequence[Point],
    start: int,
    end: int,
    grid: Grid,
    s_bandwidth: float,
) -> np.ndarray:
    """Statistical planes of shape ``(3, n_x, n_y)`` for window ``start..end``."""
    planes = np.zeros((_MOMENTS, grid.n_x, grid.n_y))
    for y_index in range(grid.n_y):
        k = grid.region.y_low + grid.incr_y * y_index
        planes[:, :, y_index] = bucket_row(points, start, end, k, grid, s_bandwidth)
    return planes