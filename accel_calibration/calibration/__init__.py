"""Accelerometer calibration estimator."""

from .window import StabilityWindow
from .state import Calibration, rotation_matrix
from .offset_scale import fit_offset_scale, sphere_residual
from .rotation import align_rotation
from .update import CalibrationGroup, update_calibration

__all__ = [
    "StabilityWindow",
    "Calibration",
    "rotation_matrix",
    "fit_offset_scale",
    "sphere_residual",
    "align_rotation",
    "CalibrationGroup",
    "update_calibration",
]
