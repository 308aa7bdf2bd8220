import pytest
import numpy as np
import liftoff_sim.constants as C


def test_gravity():
    assert C.G0 == pytest.approx(9.80665)


def test_vehicle_masses():
    assert C.STAGE1_DRY_MASS > 0
    assert C.STAGE1_PROPELLANT_MASS > 0
    assert C.UPPER_STAGE_MASS == pytest.approx(
        C.STAGE2_DRY_MASS + C.STAGE2_PROPELLANT_MASS + C.PAYLOAD_MASS)
    assert C.INITIAL_MASS == pytest.approx(
        C.STAGE1_DRY_MASS + C.STAGE1_PROPELLANT_MASS + C.UPPER_STAGE_MASS)


def test_thrust_and_isp():
    assert C.NUM_ENGINES == 9
    assert C.ENGINE_MAX_THRUST > 0
    assert C.ENGINE_ISP > 0
    # Full thrust lifts the stack off the pad
    assert C.NUM_ENGINES * C.ENGINE_MAX_THRUST > C.INITIAL_MASS * C.G0


def test_reference_area():
    assert C.REFERENCE_AREA == pytest.approx(np.pi * 2.6 ** 2)


def test_atmosphere_bands_ordered():
    assert 0 < C.TROPOSPHERE_CEILING < C.LOWER_STRATOSPHERE_CEILING


def test_mission_timing():
    assert C.DT > 0
    assert C.ENGINE_CUTOFF_TIME <= C.DYNAMICS_DURATION
    assert C.DYNAMICS_DURATION <= C.REPLAY_MAX_TIME


def test_conditioning_defaults():
    assert C.DERIVATIVE_DEPTH >= 3
    assert C.MIDDLE_LEG_FORCE_TAG > 0
    assert C.MAX_RECONCILE_PASSES > 0
