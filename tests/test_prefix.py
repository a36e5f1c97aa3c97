import random

import numpy as np
import pytest

from stkdv.dataset import Grid, Region
from stkdv.kernels import KernelType, SpaceTimeKernel
from stkdv.prefix import (
    prefix_multiple,
    prefix_single,
    random_timestamps,
    scan_tensor,
    time_window,
    windowed_scan_tensor,
)

GRID = Grid(Region(0.0, 10.0, 0.0, 10.0, 0.0, 10.0), 5, 4, 6)


def _points(count=60, seed=3):
    rng = random.Random(seed)
    return [
        (rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 10))
        for _ in range(count)
    ]


def test_random_timestamps_range_and_reproducible():
    first = random_timestamps(GRID, seed=7)
    second = random_timestamps(GRID, seed=7)
    assert first == second
    assert len(first) == GRID.n_t
    assert all(GRID.region.t_low <= t < GRID.region.t_high for t in first)


def test_random_timestamps_depend_on_seed():
    first = random_timestamps(GRID, seed=1)
    second = random_timestamps(GRID, seed=2)
    assert len(first) == len(second) == GRID.n_t
    assert first != second


def test_time_window_pinned():
    assert time_window([1.0, 2.0, 3.0, 4.0, 5.0], 3.0, 1.0) == (1, 3)


def test_time_window_empty_input():
    assert time_window([], 3.0, 1.0) == (0, -1)


def test_time_window_invariant():
    rng = random.Random(5)
    times = sorted(rng.uniform(0, 20) for _ in range(50))
    start, end = time_window(times, 9.0, 2.5)
    inside = set(range(start, end + 1))
    for i, t in enumerate(times):
        assert (i in inside) == (6.5 <= t <= 11.5)


def test_scan_tensor_point_at_query_gives_one():
    point = GRID.query(1, 2, 3)
    kernel = SpaceTimeKernel(1.0, 1.0)
    tensor = scan_tensor([point], kernel, GRID)
    assert tensor.shape == GRID.shape
    assert tensor[1, 2, 3] == pytest.approx(1.0)


def test_windowed_scan_matches_scan():
    points = _points()
    kernel = SpaceTimeKernel(3.0, 2.5, KernelType.QUARTIC, KernelType.QUARTIC)
    times = random_timestamps(GRID, seed=4)
    expected = scan_tensor(points, kernel, GRID, times)
    result = windowed_scan_tensor(points, kernel, GRID, times)
    assert np.allclose(result, expected, atol=1e-9)


def test_prefix_single_matches_scan():
    points = _points()
    kernel = SpaceTimeKernel(3.0, 2.5)
    times = random_timestamps(GRID, seed=11)
    expected = scan_tensor(points, kernel, GRID, times)
    result = prefix_single(points, GRID, times, 3.0, 2.5)
    assert np.allclose(result, expected, atol=1e-7)


def test_prefix_multiple_matches_scan():
    points = _points()
    kernel = SpaceTimeKernel(3.0, 2.5)
    expected = scan_tensor(points, kernel, GRID)
    result = prefix_multiple(points, GRID, 3.0, 2.5)
    assert np.allclose(result, expected, atol=1e-7)


def test_prefix_multiple_with_narrow_window_matches_scan():
    points = _points(count=80, seed=9)
    kernel = SpaceTimeKernel(4.0, 0.5)
    expected = scan_tensor(points, kernel, GRID)
    result = prefix_multiple(points, GRID, 4.0, 0.5)
    assert np.allclose(result, expected, atol=1e-7)


def test_prefix_multiple_without_points_is_zero():
    result = prefix_multiple([], GRID, 3.0, 2.5)
    assert result.shape == GRID.shape
    assert np.count_nonzero(result) == 0


def test_prefix_single_rejects_bad_bandwidth():
    with pytest.raises(ValueError):
        prefix_single(_points(), GRID, GRID.timestamps(), 0.0, 1.0)


def test_prefix_single_rejects_wrong_timestamp_count():
    with pytest.raises(ValueError):
        prefix_single(_points(), GRID, [1.0, 2.0], 3.0, 1.0)