"""Data types for accelerometer calibration."""

from dataclasses import dataclass
from enum import Enum
import numpy as np
from numpy.typing import NDArray

# Three components (x, y, z) in g.
Vector3 = NDArray[np.float64]


class GateStatus(Enum):
    """Outcome of evaluating a stability window against a point cloud."""
    NOT_FULL = "not_full"
    UNSTABLE = "unstable"
    NOT_NOVEL = "not_novel"
    ACCEPTED = "accepted"


@dataclass
class FitResult:
    """Outcome of a single offset/scale or rotation fit."""
    parameters: NDArray[np.float64]
    residual: float
    iterations: int
    elapsed_s: float
    timed_out: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "parameters": self.parameters.tolist(),
            "residual": self.residual,
            "iterations": self.iterations,
            "elapsed_s": self.elapsed_s,
            "timed_out": self.timed_out,
        }
