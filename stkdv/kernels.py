"""Spatial and temporal kernel functions for space-time density estimation."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

Point = Sequence[float]


class KernelType(IntEnum):
    """Kernel profiles, numbered as on the command line."""

    TRIANGULAR = 0
    EPANECHNIKOV = 1
    QUARTIC = 2
    UNIFORM = 3


def _kernel_value(kind: int, sq_distance: float, bandwidth: float) -> float:
    kind = KernelType(kind)
    if bandwidth <= 0:
        raise ValueError(f"bandwidth must be positive, got {bandwidth}")
    if kind is KernelType.TRIANGULAR:
        return max(1.0 - math.sqrt(sq_distance) / bandwidth, 0.0)
    value = 1.0 - sq_distance / (bandwidth * bandwidth)
    if value < 0:
        return 0.0
    if kind is KernelType.EPANECHNIKOV:
        return value
    if kind is KernelType.QUARTIC:
        return value * value
    return 1.0


def spatial_kernel(q: Point, p: Point, kind: int, bandwidth: float) -> float:
    """Kernel value of the (x, y) distance between ``q`` and ``p``."""
    dx = q[0] - p[0]
    dy = q[1] - p[1]
    return _kernel_value(kind, dx * dx + dy * dy, bandwidth)


def temporal_kernel(q: Point, p: Point, kind: int, bandwidth: float) -> float:
    """Kernel value of the time difference between ``q`` and ``p``."""
    dt = q[2] - p[2]
    return _kernel_value(kind, dt * dt, bandwidth)


@dataclass(frozen=True)
class SpaceTimeKernel:
    """A product of a spatial and a temporal kernel with their bandwidths."""

    s_bandwidth: float
    t_bandwidth: float
    spatial_type: KernelType = KernelType.EPANECHNIKOV
    temporal_type: KernelType = KernelType.EPANECHNIKOV

    def __post_init__(self) -> None:
        if self.s_bandwidth <= 0 or self.t_bandwidth <= 0:
            raise ValueError("bandwidths must be positive")
        object.__setattr__(self, "spatial_type", KernelType(self.spatial_type))
        object.__setattr__(self, "temporal_type", KernelType(self.temporal_type))

    def spatial(self, q: Point, p: Point) -> float:
        return spatial_kernel(q, p, self.spatial_type, self.s_bandwidth)

    def temporal(self, q: Point, p: Point) -> float:
        return temporal_kernel(q, p, self.temporal_type, self.t_bandwidth)

    def weight(self, q: Point, p: Point) -> float:
        """Contribution of data point ``p`` to the density at ``q``."""
        return self.spatial(q, p) * self.temporal(q, p)

    def density(self, q: Point, points: Sequence[Point]) -> float:
        """Density at ``q`` summed over every point."""
        return sum(self.weight(q, p) for p in points)

    def window_density(
        self, q: Point, points: Sequence[Point], start: int, end: int
    ) -> float:
        """Density at ``q`` over ``points[start]`` to ``points[end]`` inclusive."""
        if end < start:
            return 0.0
        return sum(self.weight(q, p) for p in points[start : end + 1])