"""
Liftoff Flight Replay - Validation Checks

Physical sanity checks applied to the rocket after every committed step of
the dynamics simulation. Abort on violation.
"""

import numpy as np

from .state import KinematicState


class ValidationError(Exception):
    """Raised when a physics validation check fails."""
    pass


def check_state_finite(state: KinematicState) -> bool:
    """
    Verify every derivative of the state is finite.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    for k, d in enumerate(state.derivatives):
        if not np.all(np.isfinite(d)):
            raise ValidationError(
                f"Non-finite kinematic state at t={state.t:.2f}s: "
                f"derivative {k} = {d}"
            )
    return True


def check_propellant_valid(propellant_mass: float) -> bool:
    """
    Check that remaining propellant is physically valid.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if propellant_mass < 0.0:
        raise ValidationError(f"Negative propellant mass: {propellant_mass:.3f} kg")
    return True


def check_mass_valid(m: float) -> bool:
    """
    Check that total mass is positive.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if not np.isfinite(m) or m <= 0.0:
        raise ValidationError(f"Invalid vehicle mass: m = {m} kg")
    return True


def check_throttle_valid(throttle: float) -> bool:
    """
    Check that a throttle setting lies within [0, 1].

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if not 0.0 <= throttle <= 1.0:
        raise ValidationError(f"Throttle out of bounds: {throttle}")
    return True


def validate_rocket(rocket) -> bool:
    """
    Run all checks on a Rocket.

    Raises:
        ValidationError: If any check fails
    """
    check_state_finite(rocket.state)
    check_propellant_valid(rocket.propellant_mass)
    check_mass_valid(rocket.mass)
    for engine in rocket.engines:
        check_throttle_valid(engine.throttle)
    return True
