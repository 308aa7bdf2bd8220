import pytest
import numpy as np
from liftoff_sim import validation
from liftoff_sim.config import create_test_config
from liftoff_sim.propulsion import create_falcon9
from liftoff_sim.state import KinematicState


# ============================================================================
# Individual checks
# ============================================================================

def test_check_state_finite_valid():
    assert validation.check_state_finite(KinematicState.zero())


def test_check_state_finite_nan():
    s = KinematicState.zero()
    s.derivatives[2] = np.array([np.nan, 0.0])
    with pytest.raises(validation.ValidationError):
        validation.check_state_finite(s)


def test_check_state_finite_inf():
    s = KinematicState.zero()
    s.derivatives[0] = np.array([0.0, np.inf])
    with pytest.raises(validation.ValidationError):
        validation.check_state_finite(s)


def test_check_propellant_valid():
    assert validation.check_propellant_valid(0.0)
    with pytest.raises(validation.ValidationError):
        validation.check_propellant_valid(-0.5)


def test_check_mass_valid():
    assert validation.check_mass_valid(1000.0)
    with pytest.raises(validation.ValidationError):
        validation.check_mass_valid(0.0)
    with pytest.raises(validation.ValidationError):
        validation.check_mass_valid(float('nan'))


def test_check_throttle_valid():
    assert validation.check_throttle_valid(0.0)
    assert validation.check_throttle_valid(1.0)
    with pytest.raises(validation.ValidationError):
        validation.check_throttle_valid(1.01)


# ============================================================================
# validate_rocket
# ============================================================================

def test_validate_rocket_fresh():
    assert validation.validate_rocket(create_falcon9(create_test_config()))


def test_validate_rocket_negative_propellant():
    rocket = create_falcon9(create_test_config())
    rocket.propellant_mass = -1.0
    with pytest.raises(validation.ValidationError):
        validation.validate_rocket(rocket)


def test_validate_rocket_non_finite_velocity():
    rocket = create_falcon9(create_test_config())
    rocket.state.derivatives[1] = np.array([np.inf, 0.0])
    with pytest.raises(validation.ValidationError):
        validation.validate_rocket(rocket)
