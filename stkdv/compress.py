"""Compressing a point set into weighted bin centres sized for a kernel.

The points are binned on a regular space-time grid whose cell sizes follow
from the kernel, the pooled Scott bandwidths and an error parameter; each
non-empty cell is replaced by its centre weighted by the number of points
it holds.
"""

from __future__ import annotations

import argparse
import math
import os
import sys
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from .kernels import KernelType

Point = tuple[float, float, float]


@dataclass(frozen=True)
class Bin:
    """Centre of a non-empty cell and the number of points in it."""

    x: float
    y: float
    t: float
    weight: int


@dataclass(frozen=True)
class CompressionResult:
    """Bins in cell order together with the bandwidths used to size them."""

    bins: tuple[Bin, ...]
    s_bandwidth: float
    t_bandwidth: float

    @property
    def total_weight(self) -> int:
        return sum(b.weight for b in self.bins)


def read_points(path: str | os.PathLike) -> list[Point]:
    """Read a header line ``n h_s h_t`` followed by ``n`` lines of ``x y t``."""
    with open(path, encoding="utf-8") as handle:
        header = handle.readline().split()
        if not header:
            raise ValueError(f"{path}: missing header")
        n = int(header[0])
        if n < 0:
            raise ValueError(f"{path}: negative point count {n}")
        points: list[Point] = []
        for line in handle:
            fields = line.split()
            if not fields:
                continue
            if len(fields) < 3:
                raise ValueError(f"{path}: malformed line {line.strip()!r}")
            points.append((float(fields[0]), float(fields[1]), float(fields[2])))
    if len(points) < n:
        raise ValueError(f"{path}: expected {n} points, found {len(points)}")
    return points[:n]


def pooled_bandwidths(points: Sequence[Sequence[float]]) -> tuple[float, float]:
    """Scott bandwidths with x and y pooled into one spatial sample."""
    n = len(points)
    if n < 2:
        raise ValueError("bandwidth estimation needs at least two points")
    spatial = [p[0] for p in points] + [p[1] for p in points]
    times = [p[2] for p in points]
    mean_s = sum(spatial) / (2 * n)
    mean_t = sum(times) / n
    sd_s = math.sqrt(sum((v - mean_s) ** 2 for v in spatial) / (2 * n - 1))
    sd_t = math.sqrt(sum((v - mean_t) ** 2 for v in times) / (n - 1))
    return n ** (-1.0 / 6.0) * sd_s, n ** (-1.0 / 5.0) * sd_t


def bin_sizes(
    kernel: int, s_bandwidth: float, t_bandwidth: float, epsilon: float
) -> tuple[float, float, float]:
    """Cell sizes along x, y and t for the given kernel and error parameter."""
    kind = KernelType(kernel)
    if kind is KernelType.TRIANGULAR:
        spatial = epsilon * s_bandwidth * math.sqrt(2) / 2
        temporal = epsilon * t_bandwidth
    elif kind is KernelType.EPANECHNIKOV:
        spatial = epsilon * s_bandwidth * 4 * math.sqrt(2) / 9
        temporal = epsilon * t_bandwidth * 8 / 9
    elif kind is KernelType.QUARTIC:
        spatial = epsilon * s_bandwidth * 16 * math.sqrt(6) / 75
        temporal = epsilon * t_bandwidth * 32 * math.sqrt(3) / 75
    else:
        raise ValueError(f"no bin sizes for kernel {kind.name.lower()}")
    if spatial <= 0 or temporal <= 0:
        raise ValueError("bin sizes must be positive")
    return spatial, spatial, temporal


def compress_points(
    points: Sequence[Sequence[float]],
    s_ratio: float,
    t_ratio: float,
    kernel: int,
    epsilon: float,
) -> CompressionResult:
    """Replace the points by weighted centres of the cells they fall in."""
    s_pre, t_pre = pooled_bandwidths(points)
    s_bandwidth = s_pre * s_ratio
    t_bandwidth = t_pre * t_ratio
    x_size, y_size, t_size = bin_sizes(kernel, s_bandwidth, t_bandwidth, epsilon)

    counts = Counter(
        (int(p[0] / x_size), int(p[1] / y_size), int(p[2] / t_size)) for p in points
    )
    bins = tuple(
        Bin(
            (x_bin + 0.5) * x_size,
            (y_bin + 0.5) * y_size,
            (t_bin + 0.5) * t_size,
            counts[(x_bin, y_bin, t_bin)],
        )
        for x_bin, y_bin, t_bin in sorted(counts)
    )
    return CompressionResult(bins, s_bandwidth, t_bandwidth)


def _fmt(value: float) -> str:
    return format(float(value), "g")


def write_compressed(path: str | os.PathLike, result: CompressionResult) -> None:
    """Write ``count h_s h_t`` then one ``x y t weight`` line per bin."""
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(
            f"{len(result.bins)} {_fmt(result.s_bandwidth)} {_fmt(result.t_bandwidth)}\n"
        )
        for b in result.bins:
            handle.write(f"{_fmt(b.x)} {_fmt(b.y)} {_fmt(b.t)} {b.weight}\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Compress a data file into weighted bins and write them out."""
    parser = argparse.ArgumentParser(
        prog="stkdv-compress", description="Bin points into weighted cell centres."
    )
    parser.add_argument("data_file")
    parser.add_argument("output_file")
    parser.add_argument("s_ratio", type=float)
    parser.add_argument("t_ratio", type=float)
    parser.add_argument("kernel", type=int)
    parser.add_argument("epsilon", type=float)
    args = parser.parse_args(argv)

    try:
        points = read_points(args.data_file)
    except OSError:
        print(f"Error opening file: {args.data_file}", file=sys.stderr)
        return 1
    try:
        result = compress_points(
            points, args.s_ratio, args.t_ratio, args.kernel, args.epsilon
        )
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    write_compressed(args.output_file, result)
    return 0