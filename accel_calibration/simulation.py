"""Synthetic accelerometer rig for tests and demos.

Simulates several 3-axis accelerometers rigidly mounted on one body.
The body is held still in a sequence of orientations; each channel
reports gravity through its own mounting rotation, offset and scale:

    raw = (mount @ g + offset) / scale

so that a perfect calibration gives back mount @ g at 1 g magnitude.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation

from .core.types import Vector3

_DIAG = 1.0 / np.sqrt(3.0)

# Gravity directions in the body frame, pairwise separated by > 0.4 g.
DEFAULT_ORIENTATIONS = np.array([
    [0.0, 0.0, 1.0],
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [-1.0, 0.0, 0.0],
    [0.0, -1.0, 0.0],
    [0.0, 0.0, -1.0],
    [_DIAG, _DIAG, _DIAG],
    [-_DIAG, _DIAG, -_DIAG],
])


@dataclass
class ChannelModel:
    """True error model of one simulated channel."""
    offset: Vector3 = field(default_factory=lambda: np.zeros(3))
    scale: Vector3 = field(default_factory=lambda: np.ones(3))
    mount: NDArray[np.float64] = field(default_factory=lambda: np.eye(3))

    def raw(self, gravity: Vector3) -> Vector3:
        """Raw reading for a body-frame gravity vector."""
        return (self.mount @ gravity + self.offset) / self.scale

    @classmethod
    def random(
        cls,
        rng: np.random.Generator,
        max_offset: float = 0.1,
        max_scale_error: float = 0.05,
        max_angle_deg: float = 0.0,
    ) -> "ChannelModel":
        """Draw a channel with uniformly random errors."""
        angles = rng.uniform(-max_angle_deg, max_angle_deg, 3)
        return cls(
            offset=rng.uniform(-max_offset, max_offset, 3),
            scale=1.0 + rng.uniform(-max_scale_error, max_scale_error, 3),
            mount=Rotation.from_euler("XYZ", angles, degrees=True).as_matrix(),
        )


class SyntheticRig:
    """Generates synchronized raw samples for a group of channels."""

    def __init__(
        self,
        channels: Sequence[ChannelModel],
        orientations: Optional[NDArray[np.float64]] = None,
        hold: int = 10,
        noise: float = 0.0,
        seed: Optional[int] = None,
    ):
        """Initialize the rig.

        Args:
            channels: Error model per channel.
            orientations: (k, 3) body-frame gravity directions, normalized
                to 1 g. Defaults to DEFAULT_ORIENTATIONS.
            hold: Ticks the body stays still in each orientation.
            noise: Standard deviation of Gaussian sample noise (g).
            seed: Random seed for the noise.
        """
        if orientations is None:
            orientations = DEFAULT_ORIENTATIONS
        orientations = np.asarray(orientations, dtype=np.float64).reshape(-1, 3)
        self.channels = list(channels)
        self.orientations = orientations / np.linalg.norm(orientations, axis=1, keepdims=True)
        self.hold = hold
        self.noise = noise
        self._rng = np.random.default_rng(seed)

    def sample(self, gravity: Vector3) -> List[Vector3]:
        """One raw sample per channel for a body-frame gravity vector."""
        out = []
        for ch in self.channels:
            v = ch.raw(gravity)
            if self.noise > 0:
                v = v + self._rng.normal(0.0, self.noise, 3)
            out.append(v)
        return out

    def samples(self, cycles: int = 1) -> Iterator[List[Vector3]]:
        """Cycle through the orientations, holding each for `hold` ticks."""
        for _ in range(cycles):
            for g in self.orientations:
                for _ in range(self.hold):
                    yield self.sample(g)
