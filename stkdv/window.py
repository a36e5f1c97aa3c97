"""Sliding-window density along the time axis for one spatial location."""

from __future__ import annotations

from collections.abc import Sequence

from .kernels import KernelType, SpaceTimeKernel

Point = Sequence[float]

_MOMENT_COUNTS = {KernelType.EPANECHNIKOV: 3, KernelType.QUARTIC: 5}


class SlidingWindow:
    """Incremental density over time-sorted points for increasing query times.

    The window keeps kernel-weighted moments of the timestamps of the points
    inside ``(t - b_t, t + b_t]`` and updates them as the query time moves
    forward, so each step touches only the points entering or leaving.
    """

    def __init__(self, points: Sequence[Point], kernel: SpaceTimeKernel) -> None:
        if kernel.temporal_type not in _MOMENT_COUNTS:
            raise ValueError(
                "sliding window needs an Epanechnikov or quartic temporal kernel"
            )
        self.points = points
        self.kernel = kernel
        self.moments = [0.0] * _MOMENT_COUNTS[kernel.temporal_type]
        self.start_index = 0
        self.end_index = -1
        self.start_value = 0.0
        self.end_value = 0.0
        self._q: Point = (0.0, 0.0, 0.0)

    def _accumulate(self, index: int, sign: float) -> None:
        point = self.points[index]
        weight = sign * self.kernel.spatial(self._q, point)
        power = 1.0
        for w in range(len(self.moments)):
            self.moments[w] += power * weight
            power *= point[2]

    def _density(self) -> float:
        t = self._q[2]
        g2 = 1.0 / (self.kernel.t_bandwidth * self.kernel.t_bandwidth)
        m = self.moments
        if self.kernel.temporal_type is KernelType.EPANECHNIKOV:
            return (1 - g2 * t * t) * m[0] + 2 * g2 * t * m[1] - g2 * m[2]
        g4 = g2 * g2
        t2 = t * t
        t3 = t2 * t
        t4 = t3 * t
        return (
            (1 - 2 * g2 * t2 + g4 * t4) * m[0]
            + (4 * g2 * t - 4 * g4 * t3) * m[1]
            + (6 * g4 * t2 - 2 * g2) * m[2]
            - 4 * g4 * t * m[3]
            + g4 * m[4]
        )

    def start(self, q: Point) -> float:
        """Build the window around ``q`` from scratch and return its density."""
        self._q = tuple(q)
        bandwidth = self.kernel.t_bandwidth
        self.start_value = q[2] - bandwidth
        self.end_value = q[2] + bandwidth
        self.start_index = 0
        self.end_index = -1
        self.moments = [0.0] * len(self.moments)

        started = ended = False
        last = len(self.points) - 1
        for i, point in enumerate(self.points):
            t = point[2]
            if not started and t > self.start_value:
                started = True
                self.start_index = i
            if not ended:
                if t > self.end_value:
                    ended = True
                    self.end_index = i - 1
                else:
                    if started:
                        self._accumulate(i, 1.0)
                    if i == last:
                        self.end_index = last
            if started and ended:
                break
        return self._density()

    def advance(self, q: Point) -> float:
        """Move the window to a later query ``q`` and return its density."""
        self._q = tuple(q)
        bandwidth = self.kernel.t_bandwidth
        end_prev = self.end_value
        self.start_value = q[2] - bandwidth
        self.end_value = q[2] + bandwidth
        n = len(self.points)

        leaving: list[int] = []
        drop_limit = min(end_prev, self.start_value)
        for i in range(self.start_index, n):
            t = self.points[i][2]
            if t > self.start_value:
                self.start_index = i
                break
            if t <= drop_limit:
                leaving.append(i)

        entering: list[int] = []
        add_limit = max(end_prev, self.start_value)
        for i in range(max(self.end_index, 0), n):
            t = self.points[i][2]
            if t > self.end_value:
                self.end_index = i - 1
                break
            if t > add_limit:
                entering.append(i)

        for i in leaving:
            self._accumulate(i, -1.0)
        for i in entering:
            self._accumulate(i, 1.0)
        return self._density()