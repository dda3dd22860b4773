"""Bounded Powell minimizer backed by scipy.optimize."""

import logging
import math
import time

import numpy as np
from numpy.typing import ArrayLike
from scipy.optimize import Bounds, minimize

from .base_solver import Minimizer, MinimizeResult, Objective, check_bounds

logger = logging.getLogger(__name__)


class PowellMinimizer(Minimizer):
    """Derivative-free local search using scipy's bounded Powell method.

    The time budget is checked after every Powell iteration; when it is
    exceeded the callback stops scipy and the current point is kept.
    """

    def __init__(self, max_iterations: int = 1000, xtol: float = 1e-8, ftol: float = 1e-12):
        self.max_iterations = max_iterations
        self.xtol = xtol
        self.ftol = ftol

    def minimize(
        self,
        objective: Objective,
        x0: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        time_limit: float = math.inf,
    ) -> MinimizeResult:
        x0, lower, upper = check_bounds(x0, lower, upper)
        start = time.perf_counter()
        stopped = [False]

        def budget(intermediate_result):
            if time.perf_counter() - start >= time_limit:
                stopped[0] = True
                raise StopIteration

        f0 = float(objective(x0))
        res = minimize(
            objective,
            x0,
            method="Powell",
            bounds=Bounds(lower, upper),
            callback=budget,
            options={
                "maxiter": self.max_iterations,
                "xtol": self.xtol,
                "ftol": self.ftol,
            },
        )

        x = np.clip(np.asarray(res.x, dtype=np.float64), lower, upper)
        fun = float(res.fun)
        if not fun <= f0:
            x, fun = x0, f0

        elapsed = time.perf_counter() - start
        logger.debug(
            "Powell finished: f=%.3e after %d iterations (%.1f ms): %s",
            fun, int(res.nit), elapsed * 1000, res.message,
        )

        return MinimizeResult(
            x=x,
            fun=fun,
            iterations=int(res.nit),
            elapsed_s=elapsed,
            timed_out=stopped[0],
        )
