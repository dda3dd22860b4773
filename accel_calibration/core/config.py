"""Configuration management for accelerometer calibration."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import math
import os

import yaml


@dataclass
class StabilityConfig:
    """Stability and novelty gate configuration."""
    stable_th: float = 0.2      # g, stability radius
    cal_th: float = 0.4         # g, minimum point separation
    window_size: int = 10       # ring buffer depth


@dataclass
class SolverConfig:
    """Bounded minimizer configuration."""
    time_limit: float = 0.1     # seconds, math.inf for no limit
    population: int = 10
    max_iterations: int = 1000
    stall_iterations: int = 50
    f_tol: float = 1e-12
    seed: Optional[int] = None


@dataclass
class FitConfig:
    """Parameter bounds for the offset/scale and rotation fits."""
    offset_bound: float = 1.0
    scale_min: float = 0.9
    scale_max: float = 1.1
    rotation_step: float = math.pi / 16
    min_points: int = 3


@dataclass
class MonitoringConfig:
    """Update loop monitoring configuration."""
    log_interval_s: float = 10.0


@dataclass
class Config:
    """Complete configuration for accelerometer calibration."""
    stability: StabilityConfig = field(default_factory=StabilityConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    fit: FitConfig = field(default_factory=FitConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def validate(self) -> None:
        """Check that all settings are usable.

        Raises:
            ValueError: If any threshold, bound or budget is out of range.
        """
        st = self.stability
        if st.stable_th <= 0 or st.cal_th <= 0:
            raise ValueError("stable_th and cal_th must be positive")
        if st.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {st.window_size}")

        sv = self.solver
        if not sv.time_limit > 0:
            raise ValueError(f"time_limit must be positive, got {sv.time_limit}")
        if sv.population < 1 or sv.max_iterations < 1:
            raise ValueError("population and max_iterations must be >= 1")

        ft = self.fit
        if ft.offset_bound <= 0:
            raise ValueError("offset_bound must be positive")
        if not 0 < ft.scale_min < ft.scale_max:
            raise ValueError(
                f"Invalid scale bounds [{ft.scale_min}, {ft.scale_max}]"
            )
        if ft.rotation_step <= 0:
            raise ValueError("rotation_step must be positive")
        if ft.min_points < 1:
            raise ValueError("min_points must be >= 1")


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses
            $ACCEL_CAL_CONFIG_PATH or the bundled default.

    Returns:
        Validated configuration object.

    Raises:
        FileNotFoundError: If specified config file doesn't exist.
        ValueError: If the file contains invalid settings.
    """
    if config_path is None:
        env_path = os.environ.get("ACCEL_CAL_CONFIG_PATH")
        if env_path:
            config_path = env_path
        else:
            default_path = Path(__file__).parent.parent.parent / "config" / "default.yaml"
            if default_path.exists():
                config_path = str(default_path)
            else:
                return Config()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    config = _build_config(data)
    config.validate()
    return config


def _build_config(data: dict) -> Config:
    """Build Config object from dictionary."""
    solver_data = dict(data.get("solver", {}))
    if "time_limit" in solver_data:
        solver_data["time_limit"] = _parse_time_limit(solver_data["time_limit"])

    return Config(
        stability=StabilityConfig(**data.get("stability", {})),
        solver=SolverConfig(**solver_data),
        fit=FitConfig(**data.get("fit", {})),
        monitoring=MonitoringConfig(**data.get("monitoring", {})),
    )


def _parse_time_limit(value) -> float:
    """Accept numbers, YAML .inf, or the strings 'inf'/'none'."""
    if value is None:
        return math.inf
    if isinstance(value, str):
        if value.strip().lower() in ("inf", "infinity", "none", "unlimited"):
            return math.inf
    return float(value)
