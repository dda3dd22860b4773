"""Monitoring module for the calibration update loop."""

from .metrics import CalibrationMonitor, CalibrationStats

__all__ = ["CalibrationMonitor", "CalibrationStats"]
