"""Core module for accelerometer calibration."""

from .types import Vector3, FitResult
from .validation import (
    InsufficientPointsError,
    ChannelAlignmentError,
    as_vector3,
)
from .config import Config, load_config

__all__ = [
    "Vector3",
    "FitResult",
    "InsufficientPointsError",
    "ChannelAlignmentError",
    "as_vector3",
    "Config",
    "load_config",
]
