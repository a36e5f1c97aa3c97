"""Density tensors for query times fixed on the fly or known in advance.

The scan methods sum the kernel over points directly. The prefix methods
evaluate the Epanechnikov space-time kernel from statistical planes built by
the bucket sweep: for a query time ``t`` and window planes ``S_0, S_1, S_2``
the density is ``(1 - t^2/b_t^2) S_0 + (2 t / b_t^2) S_1 - S_2 / b_t^2``.
"""

from __future__ import annotations

import random
from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Sequence

import numpy as np

from .bucket import bucket_planes
from .dataset import Grid, sort_by_time
from .kernels import SpaceTimeKernel

Point = Sequence[float]


def _check_bandwidths(s_bandwidth: float, t_bandwidth: float) -> None:
    if s_bandwidth <= 0 or t_bandwidth <= 0:
        raise ValueError("bandwidths must be positive")


def _estimate(planes: np.ndarray, t: float, t_bandwidth: float) -> np.ndarray:
    b2 = t_bandwidth * t_bandwidth
    return (
        (1.0 - t * t / b2) * planes[0]
        + (2.0 * t / b2) * planes[1]
        - planes[2] / b2
    )


def random_timestamps(grid: Grid, seed: int | None = 0) -> list[float]:
    """``n_t`` query times drawn uniformly from the grid's time range."""
    rng = random.Random(seed)
    low, high = grid.region.t_low, grid.region.t_high
    return [low + rng.random() * (high - low) for _ in range(grid.n_t)]


def time_window(
    timestamps: Sequence[float], t: float, t_bandwidth: float
) -> tuple[int, int]:
    """Inclusive index range of sorted ``timestamps`` within ``[t - b_t, t + b_t]``."""
    start = bisect_left(timestamps, t - t_bandwidth)
    end = min(bisect_right(timestamps, t + t_bandwidth), len(timestamps)) - 1
    return start, end


def _times(grid: Grid, timestamps: Iterable[float] | None) -> list[float]:
    if timestamps is None:
        return grid.timestamps()
    times = [float(t) for t in timestamps]
    if len(times) != grid.n_t:
        raise ValueError(f"expected {grid.n_t} timestamps, got {len(times)}")
    return times


def scan_tensor(
    points: Iterable[Point],
    kernel: SpaceTimeKernel,
    grid: Grid,
    timestamps: Iterable[float] | None = None,
) -> np.ndarray:
    """Density tensor by summing the kernel over every point for every query.

    Without ``timestamps`` the grid's own query times are used.
    """
    pts = [tuple(p) for p in points]
    times = _times(grid, timestamps)
    tensor = np.empty(grid.shape, dtype=float)
    for x_index in range(grid.n_x):
        for y_index in range(grid.n_y):
            x, y, _ = grid.query(x_index, y_index, 0)
            for t_index, t in enumerate(times):
                tensor[x_index, y_index, t_index] = kernel.density((x, y, t), pts)
    return tensor


def windowed_scan_tensor(
    points: Iterable[Point],
    kernel: SpaceTimeKernel,
    grid: Grid,
    timestamps: Iterable[float] | None = None,
) -> np.ndarray:
    """Density tensor summing only over points inside each query's time window."""
    ordered = sort_by_time(points)
    sorted_times = [p[2] for p in ordered]
    times = _times(grid, timestamps)
    tensor = np.empty(grid.shape, dtype=float)
    for t_index, t in enumerate(times):
        start, end = time_window(sorted_times, t, kernel.t_bandwidth)
        for x_index in range(grid.n_x):
            for y_index in range(grid.n_y):
                x, y, _ = grid.query(x_index, y_index, 0)
                tensor[x_index, y_index, t_index] = kernel.window_density(
                    (x, y, t), ordered, start, end
                )
    return tensor


def prefix_single(
    points: Iterable[Point],
    grid: Grid,
    timestamps: Iterable[float],
    s_bandwidth: float,
    t_bandwidth: float,
) -> np.ndarray:
    """Epanechnikov density tensor for arbitrary query times, one window each."""
    _check_bandwidths(s_bandwidth, t_bandwidth)
    ordered = sort_by_time(points)
    sorted_times = [p[2] for p in ordered]
    times = _times(grid, timestamps)
    tensor = np.empty(grid.shape, dtype=float)
    for t_index, t in enumerate(times):
        start, end = time_window(sorted_times, t, t_bandwidth)
        planes = bucket_planes(ordered, start, end, grid, s_bandwidth)
        tensor[:, :, t_index] = _estimate(planes, t, t_bandwidth)
    return tensor


def prefix_multiple(
    points: Iterable[Point],
    grid: Grid,
    s_bandwidth: float,
    t_bandwidth: float,
) -> np.ndarray:
    """Epanechnikov density tensor for the grid's increasing query times.

    The window planes are updated between successive times by adding the
    planes of the points that enter and subtracting those of the points
    that leave.
    """
    _check_bandwidths(s_bandwidth, t_bandwidth)
    ordered = sort_by_time(points)
    sorted_times = [p[2] for p in ordered]
    tensor = np.empty(grid.shape, dtype=float)
    planes: np.ndarray | None = None
    start = end = 0
    for t_index, t in enumerate(grid.timestamps()):
        if planes is None:
            start, end = time_window(sorted_times, t, t_bandwidth)
            planes = bucket_planes(ordered, start, end, grid, s_bandwidth)
        else:
            leave_end = bisect_left(sorted_times, t - t_bandwidth, start) - 1
            enter_end = bisect_left(sorted_times, t + t_bandwidth, end + 1) - 1
            entering = bucket_planes(ordered, end + 1, enter_end, grid, s_bandwidth)
            leaving = bucket_planes(ordered, start, leave_end, grid, s_bandwidth)
            planes = planes + entering - leaving
            start, end = leave_end + 1, enter_end
        tensor[:, :, t_index] = _estimate(planes, t, t_bandwidth)
    return tensor