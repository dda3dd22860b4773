"""Tests for rotation alignment across channels."""

import math

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.spatial.transform import Rotation

from accel_calibration.calibration.rotation import align_rotation, alignment_targets
from accel_calibration.calibration.state import Calibration
from accel_calibration.core.validation import ChannelAlignmentError

RZ_10 = Rotation.from_euler("z", 10, degrees=True).as_matrix()


def add_points(cal, points):
    for p in points:
        cal.add_point(p)


class TestPreconditions:
    """Index alignment is checked at the boundary."""

    def test_mismatched_counts(self, config):
        a, b = Calibration(config), Calibration(config)
        a.add_point([1.0, 0.0, 0.0])

        with pytest.raises(ChannelAlignmentError, match="index-aligned"):
            align_rotation([a, b])

    def test_empty_group(self):
        with pytest.raises(ChannelAlignmentError):
            align_rotation([])

    def test_no_points(self, config):
        with pytest.raises(ChannelAlignmentError):
            align_rotation([Calibration(config)])


class TestTargets:
    """Targets are means of offset/scale corrected points."""

    def test_targets_use_corrected_points(self, config):
        a, b = Calibration(config), Calibration(config)
        a.add_point([1.0, 0.0, 0.0])
        b.add_point([1.0, 0.0, 0.0])
        b.offset = np.array([0.2, 0.0, 0.0])

        assert_allclose(alignment_targets([a, b]), [[0.9, 0.0, 0.0]])


class TestAlignment:
    """Recovery of a known relative rotation."""

    def test_single_channel_stays_identity(self, unlimited_config, axis_directions):
        """A lone channel is its own target."""
        cal = Calibration(unlimited_config)
        add_points(cal, axis_directions)

        align_rotation([cal])

        assert_allclose(cal.rotation, np.eye(3), atol=1e-3)

    def test_recovers_ten_degrees(self, unlimited_config, axis_directions):
        """Two channels mounted 10 degrees apart are aligned to each other."""
        a, b = Calibration(unlimited_config), Calibration(unlimited_config)
        add_points(a, axis_directions)
        add_points(b, axis_directions @ RZ_10.T)

        align_rotation([a, b])

        relative = Rotation.from_matrix(b.rotation).inv() * Rotation.from_matrix(a.rotation)
        assert np.degrees(relative.magnitude()) == pytest.approx(10.0, abs=1.0)
        assert_allclose(a.apply(axis_directions[0]), b.apply(RZ_10 @ axis_directions[0]),
                        atol=0.02)

    def test_search_limited_to_step(self, unlimited_config, axis_directions):
        """Each call moves the angles by at most rotation_step."""
        rz_40 = Rotation.from_euler("z", 40, degrees=True).as_matrix()
        a, b = Calibration(unlimited_config), Calibration(unlimited_config)
        add_points(a, axis_directions)
        add_points(b, axis_directions @ rz_40.T)

        align_rotation([a, b])

        step = unlimited_config.fit.rotation_step
        assert np.all(np.abs(a.angles) <= step + 1e-9)
        assert np.all(np.abs(b.angles) <= step + 1e-9)

    def test_callbacks_per_channel(self, config, axis_directions):
        calls = []
        a = Calibration(config, callback=lambda: calls.append("a"))
        b = Calibration(config, callback=lambda: calls.append("b"))
        a._points.append(axis_directions[0])
        b._points.append(axis_directions[0])

        results = align_rotation([a, b], time_limit=0.01)

        assert calls == ["a", "b"]
        assert len(results) == 2

    def test_time_limit_override(self, config, axis_directions):
        a = Calibration(config)
        a._points.append(axis_directions[0])

        (result,) = align_rotation([a], time_limit=math.inf)

        assert not result.timed_out
