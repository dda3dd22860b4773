"""Per-channel calibration state.

A Calibration owns the stability window, the accumulated calibration
points and the current correction parameters of one 3-axis channel:

    corrected = rotation @ ((raw * scale) - offset)

Points, offset, scale and rotation are only changed by the fit routines
in offset_scale and rotation.
"""

import logging
from typing import Callable, List, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.transform import Rotation

from ..core.config import Config
from ..core.types import FitResult, Vector3
from ..core.validation import as_vector3
from ..solvers import Minimizer, from_config
from .offset_scale import fit_offset_scale
from .window import StabilityWindow

logger = logging.getLogger(__name__)

# Intrinsic X-Y-Z Euler sequence: R = Rx(a) @ Ry(b) @ Rz(c).
EULER_SEQUENCE = "XYZ"


def _noop() -> None:
    pass


def rotation_matrix(angles: ArrayLike) -> NDArray[np.float64]:
    """3x3 rotation matrix for three Euler angles (radians)."""
    return Rotation.from_euler(EULER_SEQUENCE, np.asarray(angles, dtype=np.float64)).as_matrix()


class Calibration:
    """Calibration of a single accelerometer channel."""

    def __init__(
        self,
        config: Optional[Config] = None,
        minimizer: Optional[Minimizer] = None,
        time_limit: Optional[float] = None,
        callback: Optional[Callable[[], None]] = None,
    ):
        """Initialize an empty calibration.

        Args:
            config: Thresholds, bounds and solver settings (defaults if None).
            minimizer: Bounded minimizer used by the fits. Built from
                config.solver if None.
            time_limit: Solver budget in seconds (math.inf for no limit).
                Defaults to config.solver.time_limit.
            callback: Zero-argument hook called after every successful fit.
        """
        self.config = config if config is not None else Config()
        st = self.config.stability

        self.window = StabilityWindow(st.window_size, st.stable_th, st.cal_th)
        self._points: List[Vector3] = []
        self.offset: Vector3 = np.zeros(3)
        self.scale: Vector3 = np.ones(3)
        self.angles: Vector3 = np.zeros(3)
        self.minimizer = minimizer if minimizer is not None else from_config(self.config.solver)
        self.time_limit = time_limit if time_limit is not None else self.config.solver.time_limit
        self.callback: Callable[[], None] = callback if callback is not None else _noop
        self.last_fit: Optional[FitResult] = None

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        return (f"Calibration(points={len(self)}, offset={self.offset.round(4).tolist()}, "
                f"scale={self.scale.round(4).tolist()}, angles={self.angles.round(4).tolist()})")

    @property
    def points(self) -> NDArray[np.float64]:
        """Copy of the calibration points as an (n, 3) array."""
        return np.array(self._points, dtype=np.float64).reshape(-1, 3)

    @property
    def rotation(self) -> NDArray[np.float64]:
        """Current rotation correction as a 3x3 matrix."""
        return rotation_matrix(self.angles)

    def apply(self, raw: ArrayLike) -> NDArray[np.float64]:
        """Correct a raw sample, or an (N, 3) array of samples."""
        v = np.asarray(raw, dtype=np.float64)
        if v.shape[-1:] != (3,) or v.ndim > 2:
            raise ValueError(f"Expected (3,) or (N, 3) samples, got shape {v.shape}")
        return ((v * self.scale) - self.offset) @ self.rotation.T

    def corrected_points(self) -> NDArray[np.float64]:
        """Points with offset and scale applied, rotation not applied."""
        return (self.points * self.scale) - self.offset

    def fit_error(self) -> float:
        """Sum of (1 - |apply(p)|)^2 over the calibration points."""
        if not self._points:
            return 0.0
        norms = np.linalg.norm(self.apply(self.points), axis=1)
        return float(np.sum((1.0 - norms) ** 2))

    def add_point(self, point: ArrayLike) -> None:
        """Append a calibration point and refit offset/scale when possible."""
        p = as_vector3(point)
        p.setflags(write=False)
        self._points.append(p)
        logger.info("Calibration point %d added: %s", len(self), np.round(self._points[-1], 4))
        if len(self) >= self.config.fit.min_points:
            self.fit_offset_scale()

    def fit_offset_scale(self, time_limit: Optional[float] = None) -> FitResult:
        """Refit offset and scale against all points (see offset_scale)."""
        return fit_offset_scale(self, time_limit=time_limit)

    def reset(self) -> None:
        """Clear window and points, reset offset and scale.

        Rotation and callback are kept: rotation describes the physical
        mounting and is not recalibrated per session.
        """
        self.window.clear()
        self._points.clear()
        self.offset = np.zeros(3)
        self.scale = np.ones(3)
        self.last_fit = None
        logger.debug("Calibration reset (rotation kept: %s)", self.angles)

    def to_dict(self) -> dict:
        """Snapshot of the parameters for JSON output."""
        return {
            "points": len(self),
            "offset": self.offset.tolist(),
            "scale": self.scale.tolist(),
            "rotation_euler_xyz": self.angles.tolist(),
            "fit_error": self.fit_error(),
        }
