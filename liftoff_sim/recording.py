"""
Liftoff Flight Replay - Simulation Recording

Per-step log shared by the telemetry replay and the dynamics simulation,
with CSV export for offline analysis.
"""

import csv
import os
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .state import KinematicState


@dataclass
class SimulationLog:
    """Container for logged simulation data."""
    time: List[float] = field(default_factory=list)
    position_x: List[float] = field(default_factory=list)  # downrange (m)
    position_y: List[float] = field(default_factory=list)  # altitude (m)
    velocity_x: List[float] = field(default_factory=list)
    velocity_y: List[float] = field(default_factory=list)
    velocity: List[float] = field(default_factory=list)
    acceleration_x: List[float] = field(default_factory=list)
    acceleration_y: List[float] = field(default_factory=list)
    acceleration: List[float] = field(default_factory=list)
    jerk_x: List[float] = field(default_factory=list)
    jerk_y: List[float] = field(default_factory=list)
    jerk: List[float] = field(default_factory=list)
    mass: List[float] = field(default_factory=list)
    propellant_remaining: List[float] = field(default_factory=list)
    throttle: List[float] = field(default_factory=list)
    thrust: List[float] = field(default_factory=list)
    drag: List[float] = field(default_factory=list)
    setpoint: List[float] = field(default_factory=list)

    def append(self, t: float, state: KinematicState, mass: float,
               propellant: float = 0.0, throttle: float = 0.0,
               thrust: float = 0.0, drag: float = 0.0,
               setpoint: float = float('nan')):
        """Log data from current timestep."""
        self.time.append(t)
        self.position_x.append(float(state.position[0]))
        self.position_y.append(float(state.position[1]))
        self.velocity_x.append(float(state.velocity[0]))
        self.velocity_y.append(float(state.velocity[1]))
        self.velocity.append(float(np.linalg.norm(state.velocity)))
        self.acceleration_x.append(float(state.acceleration[0]))
        self.acceleration_y.append(float(state.acceleration[1]))
        self.acceleration.append(float(np.linalg.norm(state.acceleration)))
        self.jerk_x.append(float(state.jerk[0]))
        self.jerk_y.append(float(state.jerk[1]))
        self.jerk.append(float(np.linalg.norm(state.jerk)))
        self.mass.append(mass)
        self.propellant_remaining.append(propellant)
        self.throttle.append(throttle)
        self.thrust.append(thrust)
        self.drag.append(drag)
        self.setpoint.append(setpoint)

    def __len__(self) -> int:
        return len(self.time)

    def to_csv(self, filename: str):
        """Write logged diagnostics to CSV for offline analysis."""
        os.makedirs(os.path.dirname(filename) or '.', exist_ok=True)
        header = [
            'time', 'downrange_m', 'altitude_m',
            'vel_x', 'vel_y', 'velocity',
            'acc_x', 'acc_y', 'acceleration',
            'jerk_x', 'jerk_y', 'jerk',
            'mass', 'propellant_remaining_kg', 'throttle',
            'thrust_N', 'drag_N', 'setpoint',
        ]
        columns = [
            self.time, self.position_x, self.position_y,
            self.velocity_x, self.velocity_y, self.velocity,
            self.acceleration_x, self.acceleration_y, self.acceleration,
            self.jerk_x, self.jerk_y, self.jerk,
            self.mass, self.propellant_remaining, self.throttle,
            self.thrust, self.drag, self.setpoint,
        ]
        with open(filename, 'w', newline='') as fh:
            writer = csv.writer(fh)
            writer.writerow(header)
            for row in zip(*columns):
                writer.writerow(row)
