"""Bounded derivative-free minimizers."""

from .base_solver import Minimizer, MinimizeResult
from .particle_swarm import ParticleSwarmMinimizer
from .powell import PowellMinimizer

__all__ = [
    "Minimizer",
    "MinimizeResult",
    "ParticleSwarmMinimizer",
    "PowellMinimizer",
    "from_config",
]


def from_config(solver_cfg) -> Minimizer:
    """Build the default minimizer from a SolverConfig."""
    return ParticleSwarmMinimizer(
        population=solver_cfg.population,
        max_iterations=solver_cfg.max_iterations,
        stall_iterations=solver_cfg.stall_iterations,
        f_tol=solver_cfg.f_tol,
        seed=solver_cfg.seed,
    )
