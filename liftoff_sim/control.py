"""
Liftoff Flight Replay - Velocity-Tracking Control

This module implements:
- A PIDF controller over a scalar state
- Decomposition of a commanded speed into horizontal/vertical components that
  closes the altitude error within one time step
"""

import math
from typing import Optional

import numpy as np

from . import constants as C
from .utils import signum


class PIDFController:
    """
    Proportional / integral / derivative / feed-forward controller.

    The controller keeps only the last observed state between calls, plus the
    running error integral for the I term.

    Attributes:
        time_step: Control period (s)
        kp, ki, kd, kf: Gains
        setpoint: Target value
        last_state: Most recent observed value
    """

    def __init__(self, time_step: float, kp: float = C.KP_VELOCITY,
                 ki: float = C.KI_VELOCITY, kd: float = C.KD_VELOCITY,
                 kf: float = C.KF_VELOCITY):
        if time_step <= 0:
            raise ValueError(f"Time step must be positive, got {time_step}")
        self.time_step = float(time_step)
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.kf = kf
        self.setpoint = 0.0
        self.last_state = 0.0
        self._integral = 0.0
        self._last_error: Optional[float] = None

    def set_setpoint(self, setpoint: float) -> None:
        self.setpoint = float(setpoint)

    def set_last_state(self, state: float) -> None:
        self.last_state = float(state)

    def compute_error(self) -> float:
        """Setpoint minus last observed state."""
        return self.setpoint - self.last_state

    def compute(self, state: float) -> float:
        """
        Record state and return the PIDF output.

        u = kp*e + ki*sum(e*dt) + kd*de/dt + kf*setpoint

        Args:
            state: Newly observed value

        Returns:
            Controller output
        """
        self.set_last_state(state)
        error = self.compute_error()
        self._integral += error * self.time_step
        derivative = 0.0
        if self._last_error is not None:
            derivative = (error - self._last_error) / self.time_step
        self._last_error = error
        return (self.kp * error + self.ki * self._integral
                + self.kd * derivative + self.kf * self.setpoint)

    def reset(self) -> None:
        """Clear the observed state and accumulated terms."""
        self.last_state = 0.0
        self._integral = 0.0
        self._last_error = None


def adjust_velocity(pidf: PIDFController, speed: float) -> np.ndarray:
    """
    Split a commanded speed into (horizontal, vertical) components.

    The vertical component is the one that closes the altitude error within a
    single time step, limited to the available speed; whatever speed remains
    goes into the horizontal component. A zero setpoint means the vehicle is
    still on the pad, so the command is purely vertical.

    Args:
        pidf: Controller holding the target altitude and last altitude
        speed: Commanded speed magnitude (m/s)

    Returns:
        Velocity command [vx, vy] (m/s)
    """
    if pidf.setpoint == 0:
        return np.array([0.0, speed])

    vy = pidf.compute_error() / pidf.time_step
    if abs(vy) > abs(speed):
        vy = signum(vy) * abs(speed)

    vx = math.sqrt(max(0.0, speed * speed - vy * vy))
    return np.array([vx, vy])
