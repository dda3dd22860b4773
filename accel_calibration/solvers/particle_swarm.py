"""Particle swarm minimizer with a wall-clock budget.

Derivative-free and population based. One particle is always seeded at
the initial guess, so the returned point is never worse than the guess.
"""

import logging
import math
import time
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from .base_solver import Minimizer, MinimizeResult, Objective, check_bounds

logger = logging.getLogger(__name__)


class ParticleSwarmMinimizer(Minimizer):
    """Bounded particle swarm optimisation (constriction coefficients)."""

    def __init__(
        self,
        population: int = 10,
        max_iterations: int = 1000,
        stall_iterations: int = 50,
        f_tol: float = 1e-12,
        seed: Optional[int] = None,
        inertia: float = 0.7298,
        cognitive: float = 1.49618,
        social: float = 1.49618,
    ):
        """Initialize the swarm settings.

        Args:
            population: Number of particles.
            max_iterations: Iteration cap used when no time limit applies.
            stall_iterations: Stop after this many iterations without the
                best value improving by more than f_tol.
            f_tol: Improvement threshold for the stall counter.
            seed: Random seed; each call restarts from the same seed.
            inertia: Velocity damping factor.
            cognitive: Pull towards each particle's own best.
            social: Pull towards the swarm best.
        """
        if population < 1:
            raise ValueError(f"population must be >= 1, got {population}")
        self.population = population
        self.max_iterations = max_iterations
        self.stall_iterations = stall_iterations
        self.f_tol = f_tol
        self.seed = seed
        self.inertia = inertia
        self.cognitive = cognitive
        self.social = social

    def minimize(
        self,
        objective: Objective,
        x0: ArrayLike,
        lower: ArrayLike,
        upper: ArrayLike,
        time_limit: float = math.inf,
    ) -> MinimizeResult:
        x0, lower, upper = check_bounds(x0, lower, upper)
        rng = np.random.default_rng(self.seed)
        start = time.perf_counter()

        n, dim = self.population, x0.size
        span = upper - lower

        pos = lower + rng.random((n, dim)) * span
        pos[0] = x0
        vel = (rng.random((n, dim)) - 0.5) * span * 0.1
        fit = np.array([objective(p) for p in pos])

        best_pos = pos.copy()
        best_fit = fit.copy()
        g = int(np.argmin(best_fit))
        g_pos = best_pos[g].copy()
        g_fit = float(best_fit[g])

        iterations = 0
        stall = 0
        timed_out = False

        while iterations < self.max_iterations:
            if time.perf_counter() - start >= time_limit:
                timed_out = True
                break
            iterations += 1

            r1 = rng.random((n, dim))
            r2 = rng.random((n, dim))
            vel = (self.inertia * vel
                   + self.cognitive * r1 * (best_pos - pos)
                   + self.social * r2 * (g_pos - pos))
            pos = np.clip(pos + vel, lower, upper)
            fit = np.array([objective(p) for p in pos])

            improved = fit < best_fit
            best_pos[improved] = pos[improved]
            best_fit[improved] = fit[improved]

            i = int(np.argmin(best_fit))
            if g_fit - best_fit[i] > self.f_tol:
                stall = 0
            else:
                stall += 1
            if best_fit[i] < g_fit:
                g_pos = best_pos[i].copy()
                g_fit = float(best_fit[i])

            if stall >= self.stall_iterations:
                break

        elapsed = time.perf_counter() - start
        logger.debug(
            "PSO finished: f=%.3e after %d iterations (%.1f ms)%s",
            g_fit, iterations, elapsed * 1000,
            " [time budget]" if timed_out else "",
        )

        return MinimizeResult(
            x=g_pos,
            fun=g_fit,
            iterations=iterations,
            elapsed_s=elapsed,
            timed_out=timed_out,
        )
