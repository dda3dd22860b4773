"""Rotation alignment across a channel group.

Channels mounted on the same rigid body see the same gravity vector.
For every point index the target is the mean of all channels' offset/
scale corrected points; each channel then gets the small rotation that
best maps its own corrected points onto the targets.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ..core.types import FitResult
from ..core.validation import ChannelAlignmentError, check_point_counts
from .state import Calibration, rotation_matrix

logger = logging.getLogger(__name__)


def alignment_residual(
    angles: NDArray[np.float64],
    points: NDArray[np.float64],
    target: NDArray[np.float64],
) -> float:
    """Sum of squared distances between targets and rotated points."""
    rotated = points @ rotation_matrix(angles).T
    return float(np.sum((target - rotated) ** 2))


def alignment_targets(calibrations: Sequence[Calibration]) -> NDArray[np.float64]:
    """Per-index mean of the corrected (unrotated) points of all channels."""
    return np.mean([c.corrected_points() for c in calibrations], axis=0)


def align_rotation(
    calibrations: Sequence[Calibration],
    time_limit: Optional[float] = None,
) -> List[FitResult]:
    """Fit the rotation of every channel in a group and notify callbacks.

    The search for each channel is limited to +/- config.fit.rotation_step
    around its current Euler angles.

    Args:
        calibrations: Channel group with index-aligned point clouds.
        time_limit: Solver budget in seconds per channel, overriding each
            channel's own time_limit.

    Returns:
        One FitResult per channel, in group order.

    Raises:
        ChannelAlignmentError: If the group is empty, point counts differ,
            or the channels have no points yet.
    """
    n = check_point_counts(calibrations)
    if n == 0:
        raise ChannelAlignmentError("Rotation alignment needs at least one point per channel")

    target = alignment_targets(calibrations)
    results = []

    for index, cal in enumerate(calibrations):
        budget = cal.time_limit if time_limit is None else time_limit
        step = cal.config.fit.rotation_step
        points = cal.corrected_points()

        x0 = cal.angles.copy()
        result = cal.minimizer.minimize(
            lambda a, pts=points: alignment_residual(a, pts, target),
            x0, x0 - step, x0 + step,
            time_limit=budget,
        )

        cal.angles = result.x.copy()
        fit = FitResult(
            parameters=result.x.copy(),
            residual=result.fun,
            iterations=result.iterations,
            elapsed_s=result.elapsed_s,
            timed_out=result.timed_out,
        )
        results.append(fit)

        logger.info(
            "Rotation fit channel %d (%d points): angles=%s deg residual=%.3e",
            index, n, np.round(np.degrees(cal.angles), 3), result.fun,
        )
        cal.callback()

    return results
