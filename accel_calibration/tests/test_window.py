"""Tests for the stability and novelty gate."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from accel_calibration.calibration.window import StabilityWindow
from accel_calibration.core.types import GateStatus

DOWN = np.array([0.0, 0.0, 1.0])


def fill(window, sample, count=None):
    for _ in range(window.window_size if count is None else count):
        window.push(sample)


class TestFullness:
    """The gate never passes before the window is full."""

    def test_partial_window_rejected(self):
        """Fewer than window_size samples is never stable-and-novel."""
        window = StabilityWindow()
        fill(window, DOWN, count=9)

        assert not window.is_full
        assert window.evaluate([]) is GateStatus.NOT_FULL
        assert not window.is_stable_and_novel([])

    def test_full_window_accepted(self):
        """A full motionless window with no points is accepted."""
        window = StabilityWindow()
        fill(window, DOWN)

        assert window.is_full
        assert window.is_stable_and_novel([])

    def test_oldest_sample_evicted(self):
        """Only the most recent window_size samples are kept."""
        window = StabilityWindow(window_size=5)
        fill(window, [1.0, 0.0, 0.0])
        fill(window, DOWN)

        assert len(window) == 5
        assert_allclose(window.mean(), DOWN)
        assert window.is_stable_and_novel([])


class TestStability:
    """Stability test against the window mean."""

    def test_single_outlier_rejected(self):
        """One sample beyond stable_th from the mean fails the gate."""
        window = StabilityWindow()
        fill(window, DOWN, count=9)
        window.push([0.0, 0.0, 1.3])

        # mean z = 1.03, outlier is 0.27 away
        assert window.evaluate([]) is GateStatus.UNSTABLE

    def test_small_noise_accepted(self):
        """Spread well inside stable_th passes."""
        rng = np.random.default_rng(1)
        window = StabilityWindow()
        for _ in range(10):
            window.push(DOWN + rng.normal(0.0, 0.01, 3))

        assert window.is_stable_and_novel([])

    def test_custom_threshold(self):
        """stable_th is honoured."""
        window = StabilityWindow(stable_th=0.5)
        fill(window, DOWN, count=9)
        window.push([0.0, 0.0, 1.3])

        assert window.is_stable_and_novel([])


class TestNovelty:
    """Novelty test against existing calibration points."""

    def test_close_point_rejected(self):
        """A mean within cal_th of an existing point fails."""
        window = StabilityWindow()
        fill(window, DOWN)

        assert window.evaluate([[0.0, 0.0, 1.3]]) is GateStatus.NOT_NOVEL

    def test_distant_points_accepted(self):
        """A mean at least cal_th from all points passes."""
        window = StabilityWindow()
        fill(window, DOWN)

        assert window.is_stable_and_novel([[0.0, 0.0, 0.5], [1.0, 0.0, 0.0]])

    def test_accepts_array_of_points(self):
        """Points may be given as an (n, 3) array."""
        window = StabilityWindow()
        fill(window, DOWN)

        assert not window.is_stable_and_novel(np.array([[0.0, 0.1, 1.0]]))


class TestInput:
    """Boundary checks on pushed samples."""

    def test_wrong_shape(self):
        with pytest.raises(ValueError):
            StabilityWindow().push([1.0, 2.0])

    def test_non_finite(self):
        with pytest.raises(ValueError, match="Non-finite"):
            StabilityWindow().push([0.0, float("nan"), 1.0])

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            StabilityWindow(window_size=0)

    def test_clear(self):
        """clear() empties the buffer."""
        window = StabilityWindow()
        fill(window, DOWN)
        window.clear()

        assert len(window) == 0
        assert window.mean() is None
