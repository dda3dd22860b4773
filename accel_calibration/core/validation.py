"""Input validation for accelerometer samples and channel groups."""

from typing import Sequence
import numpy as np
from numpy.typing import ArrayLike

from .types import Vector3


class InsufficientPointsError(ValueError):
    """Raised when a fit is requested with too few calibration points."""


class ChannelAlignmentError(ValueError):
    """Raised when a channel group's point clouds are not index-aligned."""


def as_vector3(sample: ArrayLike) -> Vector3:
    """Convert a raw sample to a finite float64 vector of shape (3,).

    Raises:
        ValueError: If the sample is not three finite real values.
    """
    v = np.array(sample, dtype=np.float64)
    if v.shape != (3,):
        raise ValueError(f"Expected a 3-axis sample, got shape {v.shape}")
    if not np.all(np.isfinite(v)):
        raise ValueError(f"Non-finite sample: {v}")
    return v


def check_point_counts(calibrations: Sequence) -> int:
    """Check that every channel in a group holds the same number of points.

    Args:
        calibrations: Channel group (objects supporting len()).

    Returns:
        The shared point count.

    Raises:
        ChannelAlignmentError: On an empty group or mismatched counts.
    """
    if len(calibrations) == 0:
        raise ChannelAlignmentError("Channel group is empty")

    counts = [len(c) for c in calibrations]
    if any(n != counts[0] for n in counts):
        raise ChannelAlignmentError(
            f"Point clouds are not index-aligned: counts={counts}"
        )
    return counts[0]


def check_group_samples(calibrations: Sequence, samples: Sequence) -> None:
    """Check there is exactly one sample per channel.

    Raises:
        ChannelAlignmentError: On an empty group or a count mismatch.
    """
    if len(calibrations) == 0:
        raise ChannelAlignmentError("Channel group is empty")
    if len(samples) != len(calibrations):
        raise ChannelAlignmentError(
            f"Got {len(samples)} samples for {len(calibrations)} channels"
        )
