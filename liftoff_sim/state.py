"""
Liftoff Flight Replay - Kinematic State

This module defines the kinematic state of a simulated body: a chain of 2-D
vectors (position, velocity, acceleration, jerk, ...) related by discrete-time
differentiation, plus the simulation time.

Frame: x is downrange distance, y is altitude (both m).
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np

from . import constants as C


def _zero_chain(depth: int) -> List[np.ndarray]:
    return [np.zeros(2) for _ in range(depth)]


@dataclass
class KinematicState:
    """
    Derivative chain of a body at one instant.

    Attributes:
        derivatives: [position, velocity, acceleration, jerk, ...] as 2-D vectors
        t: Simulation time (s)
    """
    derivatives: List[np.ndarray] = field(default_factory=lambda: _zero_chain(C.DERIVATIVE_DEPTH))
    t: float = 0.0

    def __post_init__(self):
        """Ensure vectors are float64 numpy arrays of shape (2,)."""
        if len(self.derivatives) < 2:
            raise ValueError(f"Derivative chain needs position and velocity, "
                             f"got depth {len(self.derivatives)}")
        self.derivatives = [np.asarray(d, dtype=np.float64).copy() for d in self.derivatives]
        for d in self.derivatives:
            if d.shape != (2,):
                raise ValueError(f"Kinematic vectors must have shape (2,), got {d.shape}")

    @classmethod
    def zero(cls, depth: int = C.DERIVATIVE_DEPTH) -> 'KinematicState':
        return cls(derivatives=_zero_chain(depth))

    @property
    def depth(self) -> int:
        return len(self.derivatives)

    @property
    def position(self) -> np.ndarray:
        return self.derivatives[0]

    @property
    def velocity(self) -> np.ndarray:
        return self.derivatives[1]

    @property
    def acceleration(self) -> np.ndarray:
        return self.derivatives[2] if self.depth > 2 else np.zeros(2)

    @property
    def jerk(self) -> np.ndarray:
        return self.derivatives[3] if self.depth > 3 else np.zeros(2)

    @property
    def altitude(self) -> float:
        return float(self.position[1])

    @property
    def downrange(self) -> float:
        return float(self.position[0])

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def copy(self) -> 'KinematicState':
        """Create a deep copy of the state."""
        return KinematicState(derivatives=[d.copy() for d in self.derivatives], t=self.t)

    def __str__(self) -> str:
        return (
            f"KinematicState(t={self.t:.2f}s, "
            f"alt={self.altitude/1000:.2f}km, "
            f"downrange={self.downrange/1000:.2f}km, "
            f"v={self.speed:.1f}m/s)"
        )
