"""Sliding-window density for every pixel of a space-time grid."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Sequence

import numpy as np

from .dataset import Grid, sort_by_time
from .kernels import KernelType, SpaceTimeKernel
from .window import SlidingWindow

Point = Sequence[float]


class TriangularWindow:
    """Incremental density for a triangular temporal kernel.

    The window over time-sorted points is split at the query time into a left
    part ``(t - b_t, t]`` and a right part ``(t, t + b_t]``. Each part keeps
    the sum of spatial weights and the sum of weighted timestamps, which is
    enough to evaluate the triangular kernel in closed form. ``step`` is the
    time increment between successive queries and decides how the parts are
    updated when the window moves forward.
    """

    def __init__(
        self, points: Sequence[Point], kernel: SpaceTimeKernel, step: float
    ) -> None:
        if kernel.temporal_type is not KernelType.TRIANGULAR:
            raise ValueError("triangular window needs a triangular temporal kernel")
        if step < 0:
            raise ValueError(f"step must not be negative, got {step}")
        self.points = points
        self.kernel = kernel
        self.step = float(step)
        self._times = [p[2] for p in points]
        self.start_index = 0
        self.center_index = 0
        self.end_index = 0
        self.left = [0.0, 0.0]
        self.right = [0.0, 0.0]
        self._q: Point = (0.0, 0.0, 0.0)

    def _bounds(self, t: float, lo: int = 0) -> tuple[int, int, int]:
        bandwidth = self.kernel.t_bandwidth
        start = bisect_right(self._times, t - bandwidth, lo)
        center = bisect_right(self._times, t, start)
        end = bisect_right(self._times, t + bandwidth, center)
        return start, center, end

    def _add(self, side: list[float], indices: Iterable[int], sign: float) -> None:
        for i in indices:
            point = self.points[i]
            weight = sign * self.kernel.spatial(self._q, point)
            side[0] += weight
            side[1] += point[2] * weight

    def _density(self) -> float:
        t = self._q[2]
        gamma = 1.0 / self.kernel.t_bandwidth
        left, right = self.left, self.right
        return (left[0] + right[0]) - gamma * (
            t * left[0] - left[1] + right[1] - t * right[0]
        )

    def start(self, q: Point) -> float:
        """Build the window around ``q`` from scratch and return its density."""
        self._q = tuple(q)
        start, center, end = self._bounds(q[2])
        self.left = [0.0, 0.0]
        self.right = [0.0, 0.0]
        self._add(self.left, range(start, center), 1.0)
        self._add(self.right, range(center, end), 1.0)
        self.start_index, self.center_index, self.end_index = start, center, end
        return self._density()

    def advance(self, q: Point) -> float:
        """Move the window forward by ``step`` to ``q`` and return its density."""
        bandwidth = self.kernel.t_bandwidth
        if self.step >= 2 * bandwidth:
            return self.start(q)

        self._q = tuple(q)
        old_start, old_center, old_end = (
            self.start_index,
            self.center_index,
            self.end_index,
        )
        start, center, end = self._bounds(q[2], old_start)

        if self.step <= bandwidth:
            self._add(self.left, range(old_start, start), -1.0)
            self._add(self.left, range(old_center, center), 1.0)
            self._add(self.right, range(old_center, center), -1.0)
            self._add(self.right, range(old_end, end), 1.0)
        else:
            self.left = list(self.right)
            self.right = [0.0, 0.0]
            self._add(self.left, range(old_center, start), -1.0)
            self._add(self.left, range(old_end, center), 1.0)
            self._add(self.right, range(max(center, old_end), end), 1.0)

        self.start_index, self.center_index, self.end_index = start, center, end
        return self._density()


def _make_window(
    points: Sequence[Point], kernel: SpaceTimeKernel, step: float
) -> TriangularWindow | SlidingWindow:
    if kernel.temporal_type is KernelType.TRIANGULAR:
        return TriangularWindow(points, kernel, step)
    return SlidingWindow(points, kernel)


def _series(
    points: Sequence[Point],
    kernel: SpaceTimeKernel,
    x: float,
    y: float,
    times: Sequence[float],
    step: float,
) -> list[float]:
    window = _make_window(points, kernel, step)
    if not times:
        return []
    values = [window.start((x, y, times[0]))]
    values.extend(window.advance((x, y, t)) for t in times[1:])
    return values


def pixel_series(
    points: Iterable[Point],
    kernel: SpaceTimeKernel,
    x: float,
    y: float,
    t_values: Iterable[float],
) -> list[float]:
    """Densities at ``(x, y)`` for evenly spaced, increasing query times."""
    ordered = sort_by_time(points)
    times = [float(t) for t in t_values]
    step = times[1] - times[0] if len(times) > 1 else 0.0
    return _series(ordered, kernel, x, y, times, step)


def sws_tensor(
    points: Iterable[Point], kernel: SpaceTimeKernel, grid: Grid
) -> np.ndarray:
    """Density tensor of shape ``(n_x, n_y, n_t)`` over the grid."""
    ordered = sort_by_time(points)
    times = grid.timestamps()
    tensor = np.empty(grid.shape, dtype=float)
    for x_index in range(grid.n_x):
        for y_index in range(grid.n_y):
            x, y, _ = grid.query(x_index, y_index, 0)
            tensor[x_index, y_index, :] = _series(
                ordered, kernel, x, y, times, grid.incr_t
            )
    return tensor