"""Tests for the offset/scale unit-sphere fit."""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose

from accel_calibration.calibration.offset_scale import fit_offset_scale, sphere_residual
from accel_calibration.calibration.state import Calibration
from accel_calibration.solvers import PowellMinimizer


def load_points(cal, points):
    # Bypass the automatic refit so tests control when fitting happens.
    cal._points.extend(np.asarray(p, dtype=np.float64) for p in points)


class TestSphereResidual:
    """Tests for the objective function."""

    def test_zero_on_truth(self, ellipsoid_points, true_offset, true_scale):
        params = np.concatenate([true_offset, true_scale])
        assert sphere_residual(params, ellipsoid_points) == pytest.approx(0.0, abs=1e-20)

    def test_positive_off_truth(self, ellipsoid_points):
        params = np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0])
        assert sphere_residual(params, ellipsoid_points) > 1e-3


class TestFit:
    """Recovery of known offset and scale."""

    def test_recovers_ellipsoid_pso(self, unlimited_config, ellipsoid_points,
                                    true_offset, true_scale):
        """Particle swarm recovers offset/scale of an exact ellipsoid."""
        cal = Calibration(unlimited_config)
        load_points(cal, ellipsoid_points)

        result = fit_offset_scale(cal)

        assert result.residual < 0.02
        assert cal.fit_error() < 0.02
        assert_allclose(cal.offset, true_offset, atol=0.02)
        assert_allclose(cal.scale, true_scale, atol=0.02)

    def test_recovers_ellipsoid_powell(self, unlimited_config, ellipsoid_points,
                                       true_offset, true_scale):
        """Any bounded minimizer satisfies the fit contract."""
        cal = Calibration(unlimited_config, minimizer=PowellMinimizer())
        load_points(cal, ellipsoid_points)

        fit_offset_scale(cal)

        assert cal.fit_error() < 1e-6
        assert_allclose(cal.offset, true_offset, atol=1e-3)
        assert_allclose(cal.scale, true_scale, atol=1e-3)

    def test_parameters_within_bounds(self, config):
        """Offset and scale stay inside their boxes."""
        cal = Calibration(config)
        load_points(cal, [[3.0, 0.0, 0.0], [0.0, 3.0, 0.0], [0.0, 0.0, 3.0]])

        fit_offset_scale(cal, time_limit=0.05)

        assert np.all(np.abs(cal.offset) <= 1.0)
        assert np.all((cal.scale >= 0.9) & (cal.scale <= 1.1))

    def test_idempotent_when_unlimited(self, unlimited_config, ellipsoid_points):
        """A second unlimited fit barely changes the residual."""
        cal = Calibration(unlimited_config)
        load_points(cal, ellipsoid_points)

        first = fit_offset_scale(cal).residual
        second = fit_offset_scale(cal).residual

        assert second <= first
        assert first - second < 1e-4

    def test_time_limit_override(self, config, ellipsoid_points):
        """An explicit budget overrides the channel's time_limit."""
        cal = Calibration(config)
        load_points(cal, ellipsoid_points)

        result = fit_offset_scale(cal, time_limit=math.inf)

        assert not result.timed_out

    def test_callback_called_once(self, config, ellipsoid_points):
        calls = []
        cal = Calibration(config, callback=lambda: calls.append(1))
        load_points(cal, ellipsoid_points)

        fit_offset_scale(cal)

        assert calls == [1]

    def test_callback_error_propagates(self, config, ellipsoid_points):
        """Exceptions raised by the callback reach the caller."""
        def boom():
            raise RuntimeError("observer failed")

        cal = Calibration(config, callback=boom)
        load_points(cal, ellipsoid_points)

        with pytest.raises(RuntimeError, match="observer failed"):
            fit_offset_scale(cal)
