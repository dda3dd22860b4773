"""Offset and scale fit for a single channel.

Finds per-axis offset o and scale s that best map the channel's
calibration points onto the unit sphere:

    minimise  sum((1 - |p * s - o|)^2 for p in points)

with o in [-offset_bound, offset_bound]^3 and s in [scale_min, scale_max]^3.
"""

import logging
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..core.types import FitResult
from ..core.validation import InsufficientPointsError

logger = logging.getLogger(__name__)

P_OFFSET = slice(0, 3)
P_SCALE = slice(3, 6)


def sphere_residual(params: NDArray[np.float64], points: NDArray[np.float64]) -> float:
    """Unit-sphere residual for a packed [offset, scale] parameter vector."""
    corrected = points * params[P_SCALE] - params[P_OFFSET]
    return float(np.sum((1.0 - np.linalg.norm(corrected, axis=1)) ** 2))


def fit_offset_scale(cal, time_limit: Optional[float] = None) -> FitResult:
    """Fit offset and scale of a Calibration and notify its callback.

    Args:
        cal: Calibration to update in place.
        time_limit: Solver budget in seconds, overriding cal.time_limit.
            math.inf runs to the solver's own convergence criterion.

    Returns:
        FitResult for the accepted parameters.

    Raises:
        InsufficientPointsError: If the channel has fewer than
            config.fit.min_points points.
    """
    fit_cfg = cal.config.fit
    if len(cal) < fit_cfg.min_points:
        raise InsufficientPointsError(
            f"Offset/scale fit needs at least {fit_cfg.min_points} points, got {len(cal)}"
        )
    if time_limit is None:
        time_limit = cal.time_limit

    points = cal.points

    # Start from the current parameters.
    x0 = np.concatenate([cal.offset, cal.scale])
    lower = np.array([-fit_cfg.offset_bound] * 3 + [fit_cfg.scale_min] * 3)
    upper = np.array([fit_cfg.offset_bound] * 3 + [fit_cfg.scale_max] * 3)

    result = cal.minimizer.minimize(
        lambda p: sphere_residual(p, points),
        x0, lower, upper,
        time_limit=time_limit,
    )

    cal.offset = result.x[P_OFFSET].copy()
    cal.scale = result.x[P_SCALE].copy()
    cal.last_fit = FitResult(
        parameters=result.x.copy(),
        residual=result.fun,
        iterations=result.iterations,
        elapsed_s=result.elapsed_s,
        timed_out=result.timed_out,
    )

    logger.info(
        "Offset/scale fit (%d points): offset=%s scale=%s residual=%.3e",
        len(points), np.round(cal.offset, 4), np.round(cal.scale, 4), result.fun,
    )
    if result.timed_out:
        logger.debug("Offset/scale fit cut short by the %.3f s budget", time_limit)

    cal.callback()
    return cal.last_fit
