"""Calibration update loop.

One call processes one synchronized sample per channel:

1. push each sample into its channel's stability window,
2. evaluate the stability/novelty gate for every channel,
3. only if every channel passes, append each window mean as a new
   calibration point (refitting offset/scale) and realign rotations.

A single channel is simply a group of length one.
"""

import logging
import math
import time
from typing import Callable, Iterator, List, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..core.config import Config
from ..core.types import GateStatus
from ..core.validation import as_vector3, check_group_samples, check_point_counts
from ..monitoring.metrics import CalibrationMonitor
from .rotation import align_rotation
from .state import Calibration

logger = logging.getLogger(__name__)


def update_calibration(
    calibrations: Sequence[Calibration],
    samples: Sequence[ArrayLike],
    monitor: Optional[CalibrationMonitor] = None,
) -> bool:
    """Feed one synchronized sample per channel into a channel group.

    Args:
        calibrations: Non-empty channel group.
        samples: One raw sample per channel, taken at the same instant.
        monitor: Optional monitor recording gate decisions and timing.

    Returns:
        True if a new calibration point was added to every channel.

    Raises:
        ChannelAlignmentError: If the sample count does not match the group
            or the point clouds are no longer index-aligned.
        ValueError: If a sample is malformed.
    """
    start = time.perf_counter()
    check_group_samples(calibrations, samples)
    vectors = [as_vector3(s) for s in samples]

    for cal, v in zip(calibrations, vectors):
        cal.window.push(v)

    statuses = [cal.window.evaluate(cal.points) for cal in calibrations]
    accepted = all(s is GateStatus.ACCEPTED for s in statuses)

    if accepted:
        check_point_counts(calibrations)
        means = [cal.window.mean() for cal in calibrations]
        for cal, mean in zip(calibrations, means):
            cal.add_point(mean)
        align_rotation(calibrations)
        logger.info("New calibration point accepted (%d per channel)", len(calibrations[0]))
    else:
        logger.debug("Gate: %s", [s.value for s in statuses])

    if monitor is not None:
        monitor.record_update(statuses, accepted, time.perf_counter() - start)

    return accepted


class CalibrationGroup:
    """Rigidly mounted accelerometer channels calibrated together.

    Points are appended to every channel in the same step, which keeps
    the point clouds index-aligned for rotation alignment.
    """

    def __init__(
        self,
        calibrations: Sequence[Calibration],
        config: Optional[Config] = None,
    ):
        """Initialize the group.

        Args:
            calibrations: Channels of the group, at least one.
            config: Configuration for the group monitor (defaults if None).
        """
        self._calibrations: List[Calibration] = list(calibrations)
        check_point_counts(self._calibrations)
        self.monitor = CalibrationMonitor(config)

    @classmethod
    def create(
        cls,
        channels: int = 1,
        config: Optional[Config] = None,
        callback: Optional[Callable[[], None]] = None,
    ) -> "CalibrationGroup":
        """Create a group of fresh channels sharing one configuration."""
        if channels < 1:
            raise ValueError(f"channels must be >= 1, got {channels}")
        return cls(
            [Calibration(config, callback=callback) for _ in range(channels)],
            config=config,
        )

    def __len__(self) -> int:
        return len(self._calibrations)

    def __iter__(self) -> Iterator[Calibration]:
        return iter(self._calibrations)

    def __getitem__(self, index: int) -> Calibration:
        return self._calibrations[index]

    @property
    def point_count(self) -> int:
        return len(self._calibrations[0])

    def update(self, samples: Sequence[ArrayLike]) -> bool:
        """Process one synchronized sample per channel."""
        return update_calibration(self._calibrations, samples, self.monitor)

    def apply(self, samples: Sequence[ArrayLike]) -> List[NDArray[np.float64]]:
        """Correct one raw sample per channel."""
        check_group_samples(self._calibrations, samples)
        return [cal.apply(s) for cal, s in zip(self._calibrations, samples)]

    def recalibrate(self, time_limit: float = math.inf) -> None:
        """Refit all channels with a larger (default unlimited) budget.

        Offset/scale is refitted for channels with enough points, then
        rotations are realigned once across the group.
        """
        n = check_point_counts(self._calibrations)
        if n == 0:
            logger.debug("Recalibration skipped: no points yet")
            return

        for cal in self._calibrations:
            if len(cal) >= cal.config.fit.min_points:
                cal.fit_offset_scale(time_limit=time_limit)
        align_rotation(self._calibrations, time_limit=time_limit)

    def reset(self) -> None:
        """Reset every channel (see Calibration.reset) and the monitor."""
        for cal in self._calibrations:
            cal.reset()
        self.monitor.reset()

    def to_dict(self) -> dict:
        """Snapshot of all channels and the loop statistics."""
        return {
            "channels": [cal.to_dict() for cal in self._calibrations],
            "stats": self.monitor.get_stats().to_dict(),
        }
