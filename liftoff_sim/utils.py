"""
Liftoff Flight Replay - Utility Functions

Small helpers shared across modules.
"""

import math
from typing import Optional

import numpy as np

from . import constants as C


def km_to_m(km: float) -> float:
    """Convert kilometres to metres."""
    return km * 1000.0


def signum(x: float) -> int:
    """Sign of x: -1, 0 or 1."""
    return (x > 0) - (x < 0)


def is_missing(value: Optional[float]) -> bool:
    """True for an absent sample (None) or a NaN that leaked in from numpy."""
    return value is None or math.isnan(value)


def unit_vector(v: np.ndarray) -> np.ndarray:
    """
    Normalise a vector, returning zeros for a (near) zero vector.

    Args:
        v: Vector of any dimension

    Returns:
        Unit vector along v, or a zero vector of the same shape
    """
    norm = np.linalg.norm(v)
    if norm < C.ZERO_TOLERANCE:
        return np.zeros_like(v, dtype=np.float64)
    return np.asarray(v, dtype=np.float64) / norm
