"""Loading point data, describing the output grid and writing density tensors."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np

Point = tuple[float, float, float]


@dataclass(frozen=True)
class Region:
    """The axis-aligned space-time box that the output grid covers."""

    x_low: float
    x_high: float
    y_low: float
    y_high: float
    t_low: float
    t_high: float


@dataclass(frozen=True)
class Grid:
    """A regular ``n_x`` by ``n_y`` by ``n_t`` grid of query points over a region."""

    region: Region
    n_x: int
    n_y: int
    n_t: int

    def __post_init__(self) -> None:
        if min(self.n_x, self.n_y, self.n_t) <= 0:
            raise ValueError("grid sizes must be positive")

    @property
    def incr_x(self) -> float:
        return (self.region.x_high - self.region.x_low) / self.n_x

    @property
    def incr_y(self) -> float:
        return (self.region.y_high - self.region.y_low) / self.n_y

    @property
    def incr_t(self) -> float:
        return (self.region.t_high - self.region.t_low) / self.n_t

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.n_x, self.n_y, self.n_t)

    def query(self, x_index: int, y_index: int, t_index: int) -> Point:
        """Coordinates of the grid point with the given indices."""
        return (
            self.region.x_low + x_index * self.incr_x,
            self.region.y_low + y_index * self.incr_y,
            self.region.t_low + t_index * self.incr_t,
        )

    def timestamps(self) -> list[float]:
        """The ``n_t`` query times of the grid, in increasing order."""
        return [self.region.t_low + i * self.incr_t for i in range(self.n_t)]


@dataclass(frozen=True)
class Dataset:
    """Points read from a data file together with the bandwidths it states."""

    points: tuple[Point, ...]
    s_bandwidth: float
    t_bandwidth: float

    @property
    def n(self) -> int:
        return len(self.points)


def read_dataset(path: str | os.PathLike) -> Dataset:
    """Read ``n h_s h_t`` followed by ``n`` lines of ``x y t``."""
    with open(path, encoding="utf-8") as handle:
        tokens = handle.read().split()
    if len(tokens) < 3:
        raise ValueError(f"{path}: missing header")
    n = int(tokens[0])
    if n < 0:
        raise ValueError(f"{path}: negative point count {n}")
    h_s = float(tokens[1])
    h_t = float(tokens[2])
    values = tokens[3 : 3 + 3 * n]
    if len(values) < 3 * n:
        raise ValueError(f"{path}: expected {n} points, found {len(values) // 3}")
    numbers = [float(v) for v in values]
    points = tuple(
        (numbers[i], numbers[i + 1], numbers[i + 2]) for i in range(0, 3 * n, 3)
    )
    return Dataset(points=points, s_bandwidth=h_s, t_bandwidth=h_t)


def bounding_region(points: Iterable[Sequence[float]]) -> Region:
    """Smallest region holding every point."""
    pts = list(points)
    if not pts:
        raise ValueError("cannot bound an empty point set")
    xs, ys, ts = (list(axis) for axis in zip(*((p[0], p[1], p[2]) for p in pts)))
    return Region(min(xs), max(xs), min(ys), max(ys), min(ts), max(ts))


def sort_by_time(points: Iterable[Sequence[float]]) -> list[Point]:
    """Points ordered by increasing timestamp."""
    return sorted(
        ((float(p[0]), float(p[1]), float(p[2])) for p in points),
        key=lambda p: p[2],
    )


def scott_bandwidths(points: Sequence[Sequence[float]]) -> tuple[float, float]:
    """Spatial and temporal bandwidths by Scott's rule."""
    n = len(points)
    if n < 2:
        raise ValueError("Scott's rule needs at least two points")
    sds = []
    for axis in range(3):
        values = [p[axis] for p in points]
        mean = sum(values) / n
        sds.append(math.sqrt(sum((v - mean) ** 2 for v in values) / (n - 1)))
    h_x = n ** (-1.0 / 6.0) * sds[0]
    h_y = n ** (-1.0 / 6.0) * sds[1]
    h_t = n ** (-1.0 / 5.0) * sds[2]
    return math.sqrt(h_x * h_x + h_y * h_y), h_t


def _fmt(value: float) -> str:
    return format(float(value), "g")


def _header(grid: Grid, with_time: bool = True) -> list[str]:
    r = grid.region
    lines = [
        f"x_L {_fmt(r.x_low)}",
        f"x_U {_fmt(r.x_high)}",
        f"y_L {_fmt(r.y_low)}",
        f"y_U {_fmt(r.y_high)}",
    ]
    if with_time:
        lines += [f"t_L {_fmt(r.t_low)}", f"t_U {_fmt(r.t_high)}"]
    lines += [f"n_x {grid.n_x}", f"n_y {grid.n_y}", f"n_t {grid.n_t}"]
    return lines


def _check_shape(array: np.ndarray, shape: tuple[int, ...]) -> None:
    if array.shape != shape:
        raise ValueError(f"tensor has shape {array.shape}, expected {shape}")


def _write(path: str | os.PathLike, lines: list[str], values: Iterable[float]) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        for line in lines:
            handle.write(line + "\n")
        for value in values:
            handle.write(_fmt(value) + "\n")


def write_tensor(
    path: str | os.PathLike, grid: Grid, tensor, time_major: bool
) -> None:
    """Write a header and the ``(n_x, n_y, n_t)`` tensor, one value per line.

    With ``time_major`` values run over t, then y, then x (x fastest);
    otherwise over x, then y, then t (t fastest).
    """
    array = np.asarray(tensor, dtype=float)
    _check_shape(array, grid.shape)
    flat = array.transpose(2, 1, 0).ravel() if time_major else array.ravel()
    _write(path, _header(grid), flat)


def write_tensor_stack(path: str | os.PathLike, grid: Grid, tensors) -> None:
    """Write an ``(M, N, n_x, n_y, n_t)`` stack of tensors, time-major per tensor."""
    array = np.asarray(tensors, dtype=float)
    if array.ndim != 5:
        raise ValueError("tensor stack must have five dimensions")
    m, n = array.shape[:2]
    _check_shape(array, (m, n) + grid.shape)
    lines = _header(grid) + [f"M {m}", f"N {n}"]
    flat = array.transpose(0, 1, 4, 3, 2).ravel()
    _write(path, lines, flat)


def write_kdv_map(path: str | os.PathLike, grid: Grid, tensor) -> None:
    """Write the first time slice of a tensor as a purely spatial map."""
    array = np.asarray(tensor, dtype=float)
    _check_shape(array, grid.shape)
    _write(path, _header(grid, with_time=False), array[:, :, 0].ravel())


def read_tensor(path: str | os.PathLike, grid: Grid) -> np.ndarray:
    """Read a tensor written by ``write_tensor`` in x, y, t order."""
    with open(path, encoding="utf-8") as handle:
        tokens = handle.read().split()
    body = tokens[2 * len(_header(grid)) :]
    count = grid.n_x * grid.n_y * grid.n_t
    if len(body) < count:
        raise ValueError(f"{path}: expected {count} values, found {len(body)}")
    return np.array([float(v) for v in body[:count]]).reshape(grid.shape)