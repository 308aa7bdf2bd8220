"""
Liftoff Flight Replay - Type Definitions

This module provides TypedDict definitions for structured return types,
improving type safety and IDE support.
"""

from typing import TypedDict

import numpy as np
from numpy.typing import NDArray


class ForceBreakdown(TypedDict):
    """Forces applied to the rocket during one step (2-D, +y up)."""
    weight: NDArray[np.float64]  # Weight vector (N)
    normal: NDArray[np.float64]  # Ground reaction vector (N)
    drag: NDArray[np.float64]  # Drag vector (N)
    thrust: NDArray[np.float64]  # Net thrust vector (N)
    total: NDArray[np.float64]  # Sum of all forces (N)
    drag_magnitude: float  # Drag magnitude (N)
    thrust_magnitude: float  # Thrust magnitude (N)


class AtmosphereProperties(TypedDict):
    """Return type for atmosphere model output."""
    temperature: float  # Temperature (deg C)
    pressure: float  # Pressure (kPa)
    density: float  # Density (kg/m^3)
