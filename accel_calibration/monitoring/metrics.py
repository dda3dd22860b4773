"""Counters and timings for the calibration update loop."""

import logging
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, Optional

import numpy as np

from ..core.types import GateStatus
from ..core.config import Config

logger = logging.getLogger(__name__)

GROUP_DISAGREEMENT = "group_disagreement"


@dataclass
class CalibrationStats:
    """Aggregated update loop statistics."""
    samples: int = 0
    points_accepted: int = 0
    rejections: Dict[str, int] = field(default_factory=dict)
    mean_update_ms: float = 0.0
    max_update_ms: float = 0.0
    mean_accept_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "samples": self.samples,
            "points_accepted": self.points_accepted,
            "rejections": dict(self.rejections),
            "mean_update_ms": self.mean_update_ms,
            "max_update_ms": self.max_update_ms,
            "mean_accept_ms": self.mean_accept_ms,
        }


class CalibrationMonitor:
    """Tracks gate decisions and update durations.

    A rejected update is counted once: as GROUP_DISAGREEMENT when some
    channels passed the gate and others did not, otherwise under the
    first channel's gate status.
    """

    def __init__(self, config: Optional[Config] = None, window: int = 1000):
        self._config = config if config is not None else Config()
        self._log_interval = self._config.monitoring.log_interval_s

        self._update_ms: Deque[float] = deque(maxlen=window)
        self._accept_ms: Deque[float] = deque(maxlen=window)
        self._rejections: Counter = Counter()
        self._samples = 0
        self._points = 0
        self._last_log_time = time.time()

    def record_update(
        self,
        statuses: Iterable[GateStatus],
        accepted: bool,
        elapsed_s: float,
    ) -> None:
        """Record one update step of a channel group."""
        statuses = list(statuses)
        elapsed_ms = elapsed_s * 1000
        self._samples += 1
        self._update_ms.append(elapsed_ms)

        if accepted:
            self._points += 1
            self._accept_ms.append(elapsed_ms)
        elif any(s is GateStatus.ACCEPTED for s in statuses):
            self._rejections[GROUP_DISAGREEMENT] += 1
        else:
            self._rejections[statuses[0].value] += 1

        self._maybe_log_stats()

    def _maybe_log_stats(self) -> None:
        """Log statistics periodically."""
        now = time.time()
        if now - self._last_log_time >= self._log_interval:
            stats = self.get_stats()
            logger.info(
                "Calibration: samples=%d points=%d update=%.2f ms (max %.2f ms) rejections=%s",
                stats.samples,
                stats.points_accepted,
                stats.mean_update_ms,
                stats.max_update_ms,
                stats.rejections,
            )
            self._last_log_time = now

    def get_stats(self) -> CalibrationStats:
        """Get aggregated statistics."""
        return CalibrationStats(
            samples=self._samples,
            points_accepted=self._points,
            rejections=dict(self._rejections),
            mean_update_ms=float(np.mean(self._update_ms)) if self._update_ms else 0.0,
            max_update_ms=float(np.max(self._update_ms)) if self._update_ms else 0.0,
            mean_accept_ms=float(np.mean(self._accept_ms)) if self._accept_ms else 0.0,
        )

    def reset(self) -> None:
        """Reset all metrics."""
        self._update_ms.clear()
        self._accept_ms.clear()
        self._rejections.clear()
        self._samples = 0
        self._points = 0
