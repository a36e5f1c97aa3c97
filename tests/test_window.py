import random

import pytest

from stkdv.kernels import KernelType, SpaceTimeKernel
from stkdv.window import SlidingWindow


def _points(seed=7, count=80):
    rng = random.Random(seed)
    pts = [(rng.uniform(0, 10), rng.uniform(0, 10), rng.uniform(0, 20)) for _ in range(count)]
    return sorted(pts, key=lambda p: p[2])


@pytest.mark.parametrize("temporal", [KernelType.EPANECHNIKOV, KernelType.QUARTIC])
@pytest.mark.parametrize("spatial", [KernelType.EPANECHNIKOV, KernelType.QUARTIC, KernelType.UNIFORM])
def test_start_matches_direct_density(spatial, temporal):
    pts = _points()
    kernel = SpaceTimeKernel(3.0, 2.5, spatial, temporal)
    window = SlidingWindow(pts, kernel)
    q = (5.0, 4.0, 9.0)
    assert window.start(q) == pytest.approx(kernel.density(q, pts), abs=1e-7)


@pytest.mark.parametrize("temporal", [KernelType.EPANECHNIKOV, KernelType.QUARTIC])
@pytest.mark.parametrize("step", [0.4, 1.7, 3.5, 6.0])
def test_advance_matches_direct_density(temporal, step):
    pts = _points()
    kernel = SpaceTimeKernel(3.0, 2.5, KernelType.EPANECHNIKOV, temporal)
    window = SlidingWindow(pts, kernel)
    x, y = 6.0, 3.0
    times = [step * k for k in range(int(20 / step) + 1)]
    first = window.start((x, y, times[0]))
    assert first == pytest.approx(kernel.density((x, y, times[0]), pts), abs=1e-7)
    for t in times[1:]:
        got = window.advance((x, y, t))
        assert got == pytest.approx(kernel.density((x, y, t), pts), abs=1e-6)


def test_window_indices_bound_the_interval():
    pts = _points()
    kernel = SpaceTimeKernel(3.0, 2.5)
    window = SlidingWindow(pts, kernel)
    window.start((5.0, 5.0, 4.0))
    window.advance((5.0, 5.0, 7.0))
    inside = [i for i, p in enumerate(pts) if 7.0 - 2.5 < p[2] <= 7.0 + 2.5]
    assert window.start_index == inside[0]
    assert window.end_index == inside[-1]


def test_restart_resets_state():
    pts = _points()
    kernel = SpaceTimeKernel(2.0, 3.0)
    window = SlidingWindow(pts, kernel)
    window.start((1.0, 1.0, 0.0))
    window.advance((1.0, 1.0, 5.0))
    q = (8.0, 2.0, 12.0)
    assert window.start(q) == pytest.approx(kernel.density(q, pts), abs=1e-7)


@pytest.mark.parametrize("temporal", [KernelType.TRIANGULAR, KernelType.UNIFORM])
def test_unsupported_temporal_kernel_raises(temporal):
    kernel = SpaceTimeKernel(1.0, 1.0, KernelType.EPANECHNIKOV, temporal)
    with pytest.raises(ValueError):
        SlidingWindow(_points(), kernel)