"""Bounded minimizer interface used by the calibration fits."""

from abc import ABC, abstractmethod
from typing import Callable, NamedTuple, Tuple
import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

Objective = Callable[[NDArray[np.float64]], float]


class MinimizeResult(NamedTuple):
    x: NDArray[np.float64]      # best parameter vector found
    fun: float                  # objective value at x
    iterations: int
    elapsed_s: float
    timed_out: bool             # stopped by the time budget


class Minimizer(ABC):
    """Minimize a scalar objective over a box-bounded real vector.

    Implementations start from an initial guess and honour an optional
    wall-clock budget; when the budget runs out the best point found so
    far is returned.
    """

    @abstractmethod
    def minimize(
        self,
        objective: Objective,
        x0: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        time_limit: float = math.inf,
    ) -> MinimizeResult:
        pass


def check_bounds(
    x0: ArrayLike,
    lower: ArrayLike,
    upper: ArrayLike,
) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
    """Validate a bounded problem and clip the initial guess into the box.

    Raises:
        ValueError: On shape mismatch, non-finite bounds or lower > upper.
    """
    x0 = np.asarray(x0, dtype=np.float64).ravel()
    lower = np.asarray(lower, dtype=np.float64).ravel()
    upper = np.asarray(upper, dtype=np.float64).ravel()

    if not (x0.shape == lower.shape == upper.shape):
        raise ValueError(
            f"Shape mismatch: x0={x0.shape}, lower={lower.shape}, upper={upper.shape}"
        )
    if not (np.all(np.isfinite(lower)) and np.all(np.isfinite(upper))):
        raise ValueError("Bounds must be finite")
    if np.any(lower > upper):
        raise ValueError(f"Invalid bounds: lower={lower}, upper={upper}")
    if not np.all(np.isfinite(x0)):
        raise ValueError(f"Non-finite initial guess: {x0}")

    return np.clip(x0, lower, upper), lower, upper
