"""Pytest fixtures for accelerometer calibration tests."""

import math

import pytest
import numpy as np
from numpy.typing import NDArray

from accel_calibration.core.config import Config
from accel_calibration.simulation import DEFAULT_ORIENTATIONS

AXES = np.array([
    [1.0, 0.0, 0.0],
    [-1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, -1.0, 0.0],
    [0.0, 0.0, 1.0],
    [0.0, 0.0, -1.0],
])


@pytest.fixture
def config() -> Config:
    """Default configuration with a fixed solver seed."""
    cfg = Config()
    cfg.solver.seed = 0
    return cfg


@pytest.fixture
def unlimited_config(config) -> Config:
    """Seeded configuration without a solver time limit."""
    config.solver.time_limit = math.inf
    return config


@pytest.fixture
def axis_directions() -> NDArray[np.float64]:
    """The six unit axis directions."""
    return AXES.copy()


@pytest.fixture
def sphere_directions() -> NDArray[np.float64]:
    """Fourteen well spread unit directions (axes and cube diagonals)."""
    diag = np.array([[sx, sy, sz]
                     for sx in (-1.0, 1.0)
                     for sy in (-1.0, 1.0)
                     for sz in (-1.0, 1.0)]) / np.sqrt(3.0)
    return np.vstack([AXES, diag])


@pytest.fixture
def true_offset() -> NDArray[np.float64]:
    return np.array([0.05, -0.03, 0.08])


@pytest.fixture
def true_scale() -> NDArray[np.float64]:
    return np.array([1.03, 0.97, 1.02])


@pytest.fixture
def ellipsoid_points(sphere_directions, true_offset, true_scale) -> NDArray[np.float64]:
    """Raw points whose exact correction lands on the unit sphere.

    raw * scale - offset = direction
    """
    return (sphere_directions + true_offset) / true_scale


@pytest.fixture
def orientations() -> NDArray[np.float64]:
    """Gravity directions used by the synthetic rig."""
    return DEFAULT_ORIENTATIONS.copy()
