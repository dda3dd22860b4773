"""Sliding window stability and novelty gate.

Keeps the most recent raw samples of one channel and decides whether
they describe a motionless orientation that has not been captured yet.
"""

from collections import deque
from typing import Deque, Iterable, Optional

import numpy as np
from numpy.typing import ArrayLike

from ..core.types import GateStatus, Vector3
from ..core.validation import as_vector3


class StabilityWindow:
    """Fixed-capacity ring buffer of recent samples for one channel."""

    def __init__(
        self,
        window_size: int = 10,
        stable_th: float = 0.2,
        cal_th: float = 0.4,
    ):
        """Initialize the window.

        Args:
            window_size: Number of samples that make a full window.
            stable_th: Maximum distance of any sample from the window mean (g).
            cal_th: Minimum distance of the window mean from existing points (g).
        """
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self.window_size = window_size
        self.stable_th = stable_th
        self.cal_th = cal_th
        self._buffer: Deque[Vector3] = deque(maxlen=window_size)

    def push(self, sample: ArrayLike) -> None:
        """Store a sample, evicting the oldest one when full."""
        self._buffer.append(as_vector3(sample))

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def is_full(self) -> bool:
        return len(self._buffer) == self.window_size

    def mean(self) -> Optional[Vector3]:
        """Arithmetic mean of the buffered samples, None when empty."""
        if not self._buffer:
            return None
        return np.mean(np.array(self._buffer), axis=0)

    def evaluate(self, existing_points: Iterable[ArrayLike]) -> GateStatus:
        """Run the fullness, stability and novelty tests in order."""
        if not self.is_full:
            return GateStatus.NOT_FULL

        samples = np.array(self._buffer)
        mean = samples.mean(axis=0)

        # All samples in the window must be close to the mean of the window.
        sq_dist = np.sum((samples - mean) ** 2, axis=1)
        if np.any(sq_dist > self.stable_th ** 2):
            return GateStatus.UNSTABLE

        points = np.asarray(list(existing_points), dtype=np.float64).reshape(-1, 3)
        if len(points) and np.any(np.linalg.norm(points - mean, axis=1) < self.cal_th):
            return GateStatus.NOT_NOVEL

        return GateStatus.ACCEPTED

    def is_stable_and_novel(self, existing_points: Iterable[ArrayLike]) -> bool:
        """True when the full window is motionless and far from every point."""
        return self.evaluate(existing_points) is GateStatus.ACCEPTED
