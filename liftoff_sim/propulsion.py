"""
Liftoff Flight Replay - Engine / Propellant Model

Each engine holds its own throttle; thrust and propellant flow derive
linearly from it:

    thrust = throttle * max_thrust
    mdot   = thrust / (Isp * g0)

The Rocket is a force-driven Body whose mass is the sum of its dry mass, the
remaining propellant and, until separation, the upper stage it carries.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from . import constants as C
from .config import SimulationConfig, create_default_config
from .integrators import Body, DriveMode
from .types import ForceBreakdown

logger = logging.getLogger(__name__)

FORCE_NAMES = ('weight', 'normal', 'drag', 'thrust')


@dataclass
class Engine:
    """
    Single rocket engine.

    Attributes:
        max_thrust: Maximum thrust (N)
        isp: Specific impulse (s)
        throttle: Current throttle, kept within [0, 1]
    """
    max_thrust: float
    isp: float
    throttle: float = 0.0

    def __post_init__(self):
        if self.max_thrust <= 0:
            raise ValueError(f"Engine max thrust must be positive, got {self.max_thrust}")
        if self.isp <= 0:
            raise ValueError(f"Engine Isp must be positive, got {self.isp}")
        self.set_throttle(self.throttle)

    def set_throttle(self, throttle: float) -> float:
        """Set the throttle, clamped to [0, 1]; NaN commands are ignored."""
        if not np.isnan(throttle):
            self.throttle = float(np.clip(throttle, 0.0, 1.0))
        return self.throttle

    @property
    def thrust(self) -> float:
        """Current thrust (N)."""
        return self.throttle * self.max_thrust

    @property
    def propellant_flow_rate(self) -> float:
        """Propellant mass flow at the current throttle (kg/s)."""
        return self.thrust / (self.isp * C.G0)


def create_engines(count: int = C.NUM_ENGINES,
                   max_thrust: float = C.ENGINE_MAX_THRUST,
                   isp: float = C.ENGINE_ISP) -> List[Engine]:
    """Create a cluster of identical engines."""
    return [Engine(max_thrust=max_thrust, isp=isp) for _ in range(count)]


class Rocket(Body):
    """
    Force-driven rocket with propellant and a separable upper stage.

    The applied forces are held in named slots (weight, normal, drag, thrust)
    and summed by compute_forces().
    """

    def __init__(self, dry_mass: float, propellant_mass: float, engines: List[Engine],
                 upper_stage_mass: float = 0.0,
                 derivatives: int = C.DERIVATIVE_DEPTH, time_step: float = C.DT):
        if dry_mass <= 0:
            raise ValueError(f"Dry mass must be positive, got {dry_mass}")
        if propellant_mass < 0 or upper_stage_mass < 0:
            raise ValueError("Propellant and upper-stage masses must be non-negative")

        self.dry_mass = float(dry_mass)
        self.propellant_mass = float(propellant_mass)
        self.upper_stage_mass = float(upper_stage_mass)
        self.separated = False
        self.engines = list(engines)
        super().__init__(self.mass, mode=DriveMode.FORCE,
                         derivatives=derivatives, time_step=time_step)
        self._slots: Dict[str, int] = {name: self.add_force() for name in FORCE_NAMES}

    @property
    def mass(self) -> float:
        """Current total mass (kg)."""
        upper = 0.0 if self.separated else self.upper_stage_mass
        return self.dry_mass + self.propellant_mass + upper

    @property
    def has_propellant(self) -> bool:
        return self.propellant_mass > 0.0

    @property
    def thrust(self) -> float:
        """Sum of engine thrusts at current throttles (N)."""
        return sum(e.thrust for e in self.engines)

    @property
    def max_thrust(self) -> float:
        return sum(e.max_thrust for e in self.engines)

    def set_force(self, name: str, force: np.ndarray) -> None:
        self.forces[self._slots[name]] = np.asarray(force, dtype=np.float64)

    def get_force(self, name: str) -> np.ndarray:
        return self.forces[self._slots[name]]

    def set_throttle(self, throttle: float) -> None:
        """Command the same throttle on every engine."""
        for e in self.engines:
            e.set_throttle(throttle)

    def drain_propellant(self, drain_mass: float) -> float:
        """
        Remove propellant, never going below zero.

        Args:
            drain_mass: Mass to remove (kg), must be non-negative

        Returns:
            Mass actually removed (kg)
        """
        if drain_mass < 0:
            raise ValueError(f"Cannot drain a negative propellant mass: {drain_mass}")
        drained = min(drain_mass, self.propellant_mass)
        self.propellant_mass -= drained
        return drained

    def burn(self, dt: float) -> float:
        """Drain the propellant consumed by every engine over dt (kg)."""
        total = 0.0
        for e in self.engines:
            total += self.drain_propellant(e.propellant_flow_rate * dt)
        return total

    def separate_stage(self) -> bool:
        """
        Drop the upper stage mass. Only the first call has an effect.

        Returns:
            True if the stage was separated by this call
        """
        if self.separated:
            return False
        self.separated = True
        logger.info(f"Stage separation at t={self.t:.1f}s: "
                    f"-{self.upper_stage_mass:.0f} kg, mass now {self.mass:.0f} kg")
        return True

    def force_breakdown(self) -> ForceBreakdown:
        """Named forces of the current step."""
        weight = self.get_force('weight')
        normal = self.get_force('normal')
        drag = self.get_force('drag')
        thrust = self.get_force('thrust')
        return {
            'weight': weight.copy(),
            'normal': normal.copy(),
            'drag': drag.copy(),
            'thrust': thrust.copy(),
            'total': weight + normal + drag + thrust,
            'drag_magnitude': float(np.linalg.norm(drag)),
            'thrust_magnitude': float(np.linalg.norm(thrust)),
        }

    def __str__(self) -> str:
        return (f"Rocket(t={self.t:.1f}s, m={self.mass:.0f}kg, "
                f"prop={self.propellant_mass:.0f}kg, separated={self.separated})")


def create_falcon9(config: SimulationConfig = None) -> Rocket:
    """
    Build the first-stage rocket described by a SimulationConfig.

    The upper stage (second stage wet mass and payload) rides along until
    separation.
    """
    if config is None:
        config = create_default_config()

    engines = create_engines(config.num_engines, config.engine_max_thrust, config.engine_isp)
    return Rocket(dry_mass=config.stage1_dry_mass,
                  propellant_mass=config.stage1_propellant_mass,
                  engines=engines,
                  upper_stage_mass=config.upper_stage_mass,
                  derivatives=config.derivative_depth,
                  time_step=config.dt)
