"""
Liftoff Flight Replay - Atmosphere and Force Computations

This module implements:
- Piecewise Earth atmosphere (NASA GRC model, three altitude bands)
- Quadratic drag
- Weight, ground reaction and thrust vectors in the downrange/altitude plane

Reference: https://www.grc.nasa.gov/WWW/K-12/airplane/atmosmet.html
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from . import constants as C
from .types import AtmosphereProperties
from .utils import is_missing, unit_vector

VERTICAL = np.array([0.0, 1.0])


# =============================================================================
# ATMOSPHERE MODEL
# =============================================================================

@dataclass(frozen=True)
class AtmosphereModel:
    """
    Three-band approximation of Earth's atmosphere.

    Band coefficients default to the NASA GRC values in constants; pass
    different values to model another atmosphere. Temperatures are in deg C
    and pressures in kPa, so density comes out in kg/m^3.
    """
    troposphere_ceiling: float = C.TROPOSPHERE_CEILING
    lower_stratosphere_ceiling: float = C.LOWER_STRATOSPHERE_CEILING
    tropo_t0: float = C.TROPO_T0
    tropo_lapse: float = C.TROPO_LAPSE
    tropo_p0: float = C.TROPO_P0
    tropo_t_ref: float = C.TROPO_T_REF
    tropo_exponent: float = C.TROPO_EXPONENT
    lower_strato_t: float = C.LOWER_STRATO_T
    lower_strato_p0: float = C.LOWER_STRATO_P0
    lower_strato_a: float = C.LOWER_STRATO_A
    lower_strato_b: float = C.LOWER_STRATO_B
    upper_strato_t0: float = C.UPPER_STRATO_T0
    upper_strato_lapse: float = C.UPPER_STRATO_LAPSE
    upper_strato_p0: float = C.UPPER_STRATO_P0
    upper_strato_t_ref: float = C.UPPER_STRATO_T_REF
    upper_strato_exponent: float = C.UPPER_STRATO_EXPONENT
    celsius_offset: float = C.CELSIUS_OFFSET
    gas_constant: float = C.R_AIR

    def properties(self, altitude: Optional[float]) -> Optional[AtmosphereProperties]:
        """
        Temperature, pressure and density at the given altitude.

        Args:
            altitude: Geometric altitude (m)

        Returns:
            AtmosphereProperties, or None when the altitude is missing
        """
        if is_missing(altitude):
            return None

        k = self.celsius_offset
        if altitude >= self.lower_stratosphere_ceiling:
            T = self.upper_strato_t0 + self.upper_strato_lapse * altitude
            p = self.upper_strato_p0 * ((T + k) / self.upper_strato_t_ref) ** self.upper_strato_exponent
        elif altitude >= self.troposphere_ceiling:
            T = self.lower_strato_t
            p = self.lower_strato_p0 * math.exp(self.lower_strato_a - self.lower_strato_b * altitude)
        else:
            T = self.tropo_t0 + self.tropo_lapse * altitude
            p = self.tropo_p0 * ((T + k) / self.tropo_t_ref) ** self.tropo_exponent

        rho = p / (self.gas_constant * (T + k))
        return {'temperature': T, 'pressure': p, 'density': rho}

    def pressure(self, altitude: Optional[float]) -> Optional[float]:
        """Static pressure (kPa), None when altitude is missing."""
        props = self.properties(altitude)
        return None if props is None else props['pressure']

    def density(self, altitude: Optional[float]) -> Optional[float]:
        """Air density (kg/m^3), None when altitude is missing."""
        props = self.properties(altitude)
        return None if props is None else props['density']


EARTH_ATMOSPHERE = AtmosphereModel()


# =============================================================================
# DRAG
# =============================================================================

def compute_drag(cd: float, rho: float, v: float, area: float) -> float:
    """
    Quadratic drag magnitude.

    D = 0.5 * Cd * rho * v^2 * A

    Args:
        cd: Drag coefficient
        rho: Air density (kg/m^3)
        v: Speed (m/s)
        area: Reference area (m^2)

    Returns:
        Drag magnitude (N)
    """
    return 0.5 * cd * rho * v * v * area


def compute_drag_earth(cd: float, altitude: float, v: float, area: float,
                       atmosphere: AtmosphereModel = EARTH_ATMOSPHERE) -> Optional[float]:
    """Drag magnitude at altitude, None when the atmosphere is undefined there."""
    rho = atmosphere.density(altitude)
    if rho is None:
        return None
    return compute_drag(cd, rho, v, area)


def compute_drag_force(cd: float, altitude: float, velocity: np.ndarray, area: float,
                       atmosphere: AtmosphereModel = EARTH_ATMOSPHERE) -> np.ndarray:
    """
    Drag vector opposing the current velocity.

    Args:
        cd: Drag coefficient
        altitude: Altitude (m)
        velocity: Velocity vector (m/s)
        area: Reference area (m^2)
        atmosphere: Atmosphere model

    Returns:
        Drag force vector (N); zero when at rest or altitude is undefined
    """
    speed = float(np.linalg.norm(velocity))
    if speed < C.ZERO_TOLERANCE:
        return np.zeros(2)
    drag = compute_drag_earth(cd, altitude, speed, area, atmosphere)
    if drag is None:
        return np.zeros(2)
    return -np.asarray(velocity, dtype=np.float64) * drag / speed


# =============================================================================
# BODY FORCES
# =============================================================================

def compute_weight_force(mass: float, g: float = C.G0) -> np.ndarray:
    """Weight vector (N), pointing down."""
    return np.array([0.0, -g * mass])


def compute_normal_force(other_forces: Sequence[np.ndarray]) -> np.ndarray:
    """
    Ground reaction cancelling every downward force component.

    Upward components (e.g. thrust) are left unopposed so the vehicle can
    lift off.

    Args:
        other_forces: All applied forces except the normal force (N)

    Returns:
        Normal force vector (N)
    """
    n = 0.0
    for force in other_forces:
        if force[1] < 0:
            n -= force[1]
    return np.array([0.0, n])


def compute_thrust_force(thrust: float, direction: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Thrust vector along direction, vertical when no direction is given.

    Args:
        thrust: Net thrust magnitude (N)
        direction: Desired thrust direction (normalised here)

    Returns:
        Thrust force vector (N)
    """
    if direction is None:
        return thrust * VERTICAL
    u = unit_vector(direction)
    if not np.any(u):
        return thrust * VERTICAL
    return thrust * u
