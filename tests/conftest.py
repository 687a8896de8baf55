"""
Pytest fixtures for covdist tests.
"""

import pytest
import numpy as np

from covdist.core.point import CallCounter, DimsContext


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(42)


@pytest.fixture
def counter() -> CallCounter:
    return CallCounter()


@pytest.fixture
def dims2(counter: CallCounter) -> DimsContext:
    """Two-dimensional context with an attached counter."""
    return DimsContext(2, counter)


@pytest.fixture
def lld_points():
    """Two (lon, lat, depth) points a few hundred km apart."""
    p1 = np.array([10.0, 45.0, 5.0])
    p2 = np.array([13.0, 43.5, 12.0])
    return p1, p2


@pytest.fixture
def lld_scales() -> np.ndarray:
    """Great-circle and depth lengthscales for 3D metrics."""
    return np.array([100.0, 20.0])


@pytest.fixture
def two_body_points():
    """Two (station, event) points for 6D metrics."""
    p1 = np.array([10.0, 45.0, 0.5, 20.0, 40.0, 15.0])
    p2 = np.array([11.5, 44.0, 0.2, 22.0, 41.0, 30.0])
    return p1, p2


@pytest.fixture
def two_body_scales() -> np.ndarray:
    return np.array([150.0, 2.0, 300.0, 25.0])


@pytest.fixture
def random_lonlat_pairs(rng):
    """
    Random (lon, lat) pairs, excluding near-coincident and
    near-antipodal configurations.
    """
    from covdist.distance.geo import dist_km

    pairs = []
    while len(pairs) < 50:
        p1 = np.array([rng.uniform(-180, 180), rng.uniform(-80, 80)])
        p2 = np.array([rng.uniform(-180, 180), rng.uniform(-80, 80)])
        if 50.0 < dist_km(p1, p2) < 19000.0:
            pairs.append((p1, p2))
    return pairs


def central_difference(f, x, i, h=1e-6):
    """Central finite difference of f w.r.t. x[i]."""
    x = np.array(x, dtype=np.float64)
    hi = x.copy()
    lo = x.copy()
    hi[i] += h
    lo[i] -= h
    return (f(hi) - f(lo)) / (2 * h)


@pytest.fixture
def numeric_diff():
    """The central finite-difference helper, as a fixture."""
    return central_difference


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end tests across modules")
    config.addinivalue_line("markers", "slow: long-running tests")
