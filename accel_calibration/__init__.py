"""Online accelerometer calibration.

Estimates per-axis offset, per-axis scale and inter-channel rotation for
one or more 3-axis accelerometer channels from a live sample stream,
assuming a stationary sensor measures gravity at 1 g.
"""

from .core import Config, load_config, FitResult
from .calibration import (
    Calibration,
    CalibrationGroup,
    StabilityWindow,
    align_rotation,
    fit_offset_scale,
    update_calibration,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "FitResult",
    "Calibration",
    "CalibrationGroup",
    "StabilityWindow",
    "align_rotation",
    "fit_offset_scale",
    "update_calibration",
]
