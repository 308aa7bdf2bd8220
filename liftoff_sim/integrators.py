"""
Liftoff Flight Replay - Kinematic / Force-Driven Integrator

A single Body integrates a discrete-time derivative chain
(position -> velocity -> acceleration -> jerk -> ...). Its DriveMode selects
which link is imposed from outside each step:

- VELOCITY: the velocity is commanded; position is advanced by p += v*dt and
  acceleration, jerk, ... are finite differences of the commanded velocity.
- FORCE: the applied forces are summed; a = sum(F) / m with the mass of the
  current step, v += a*dt, p += v*dt, and jerk, ... are finite differences.

Per-tick protocol:
    pre_compute()      snapshot the previous step
    compute_forces()   sum applied forces (FORCE mode)
    compute_motion()   apply the drive rule
    post_compute()     finite-difference the remaining derivatives, advance time
"""

from enum import Enum, auto
from typing import List, Optional

import numpy as np

from . import constants as C
from .state import KinematicState


class DriveMode(Enum):
    """Which derivative is authoritative each step."""
    VELOCITY = auto()
    FORCE = auto()


class Body:
    """
    Point-mass body in the downrange/altitude plane.

    Attributes:
        mode: DriveMode selecting the imposed quantity
        time_step: Integration step (s)
        state: Current KinematicState
        previous: Snapshot of the state before the current step
        forces: Applied force vectors (N), summed in FORCE mode
        net_force: Result of the last compute_forces() call (N)
    """

    def __init__(self, mass: float, mode: DriveMode = DriveMode.FORCE,
                 derivatives: int = C.DERIVATIVE_DEPTH, time_step: float = C.DT):
        if time_step <= 0:
            raise ValueError(f"Time step dt must be positive, got {time_step}")
        if derivatives < 2:
            raise ValueError(f"Derivative chain depth must be at least 2, got {derivatives}")
        if mode is DriveMode.FORCE and derivatives < 3:
            raise ValueError("Force-driven bodies need an acceleration term (depth >= 3)")

        self.mode = mode
        self.time_step = float(time_step)
        self._mass = float(mass)
        self.state = KinematicState.zero(derivatives)
        self.previous = self.state.copy()
        self.forces: List[np.ndarray] = []
        self.net_force = np.zeros(2)

    # ── Mass ─────────────────────────────────────────────────────────────
    @property
    def mass(self) -> float:
        return self._mass

    @mass.setter
    def mass(self, value: float):
        self._mass = float(value)

    # ── Derivative access ────────────────────────────────────────────────
    @property
    def derivatives(self) -> List[np.ndarray]:
        return self.state.derivatives

    @property
    def position(self) -> np.ndarray:
        return self.state.position

    @property
    def velocity(self) -> np.ndarray:
        return self.state.velocity

    @property
    def acceleration(self) -> np.ndarray:
        return self.state.acceleration

    @property
    def jerk(self) -> np.ndarray:
        return self.state.jerk

    @property
    def t(self) -> float:
        return self.state.t

    def set_velocity(self, velocity: np.ndarray) -> None:
        """Overwrite the current velocity (command in VELOCITY mode, reset in FORCE mode)."""
        velocity = np.asarray(velocity, dtype=np.float64)
        if velocity.shape != (2,):
            raise ValueError(f"Velocity must have shape (2,), got {velocity.shape}")
        if np.any(np.isnan(velocity)):
            raise ValueError("Velocity contains NaN values")
        self.state.derivatives[1] = velocity.copy()

    def add_force(self, force: Optional[np.ndarray] = None) -> int:
        """Append an applied force slot and return its index."""
        self.forces.append(np.zeros(2) if force is None else np.asarray(force, dtype=np.float64))
        return len(self.forces) - 1

    # ── Tick protocol ────────────────────────────────────────────────────
    @property
    def _authoritative(self) -> int:
        return 1 if self.mode is DriveMode.VELOCITY else 2

    def pre_compute(self) -> None:
        """Snapshot the committed state before this step changes it."""
        self.previous = self.state.copy()

    def compute_forces(self) -> np.ndarray:
        """Sum the applied forces into net_force."""
        total = np.zeros(2)
        for force in self.forces:
            total = total + force
        self.net_force = total
        return total

    def compute_motion(self) -> None:
        """Apply the drive rule for this step."""
        dt = self.time_step
        d = self.state.derivatives

        if self.mode is DriveMode.FORCE:
            mass = self.mass
            if mass <= 0:
                raise ValueError(f"Body mass must be positive, got {mass}")
            d[2] = self.net_force / mass
            d[1] = d[1] + d[2] * dt

        d[0] = d[0] + d[1] * dt

    def post_compute(self) -> None:
        """Finite-difference the derivatives above the imposed one and advance time."""
        dt = self.time_step
        d = self.state.derivatives
        prev = self.previous.derivatives
        for k in range(self._authoritative + 1, len(d)):
            d[k] = (d[k - 1] - prev[k - 1]) / dt
        self.state.t = self.previous.t + dt

    def step(self) -> KinematicState:
        """Run one full tick and return a snapshot of the committed state."""
        self.pre_compute()
        if self.mode is DriveMode.FORCE:
            self.compute_forces()
        self.compute_motion()
        self.post_compute()
        return self.snapshot()

    def snapshot(self) -> KinematicState:
        """Read-only copy of the committed state for observers."""
        return self.state.copy()
