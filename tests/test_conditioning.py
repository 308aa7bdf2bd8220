import numpy as np
import pytest

from liftoff_sim.conditioning import (
    ReconciliationError, adjust_altitude, condition_profile, fit_altitude, reconcile,
)
from liftoff_sim.config import create_test_config
from liftoff_sim.events import EventDetectionError
from liftoff_sim.flight_profile import FlightProfile
from liftoff_sim.timeseries import TimeSeries

from conftest import make_raw_profile


def _steep_profile():
    """Altitude climbs at 200 m/s while velocity only reports 100 m/s."""
    profile = FlightProfile(time_step=1.0)
    for t in range(11):
        profile.put_velocity(float(t), 100.0)
        profile.put_altitude(float(t), 200.0 * t)
    return profile


# ============================================================================
# Reconciliation
# ============================================================================

def test_reconcile_reaches_fixed_point():
    fitted = _steep_profile()
    original = fitted.copy()
    result = reconcile(original, fitted, max_time=10.0, max_passes=100)

    assert result.converged
    assert result.passes == 10
    assert result.break_even == 9.0
    for t in range(9):
        assert fitted.get_altitude(float(t)) == pytest.approx(100.0 * (t + 1))


def test_reconcile_velocity_sustains_every_step():
    fitted = _steep_profile()
    reconcile(fitted.copy(), fitted, max_time=10.0, max_passes=100)
    for t in range(1, 9):
        climb = fitted.get_altitude(float(t)) - fitted.get_altitude(float(t - 1))
        assert fitted.get_velocity(float(t)) >= climb - 1e-9


def test_reconcile_bounded_passes():
    fitted = _steep_profile()
    result = reconcile(fitted.copy(), fitted, max_time=10.0, max_passes=3)
    assert not result.converged
    assert result.passes == 3


def test_reconcile_no_correction_needed():
    profile = FlightProfile(time_step=1.0)
    for t in range(10):
        profile.put_velocity(float(t), 500.0)
        profile.put_altitude(float(t), 10.0 * t)
    result = reconcile(profile.copy(), profile, max_time=10.0, max_passes=5)
    assert result.converged
    assert result.passes == 1
    assert result.break_even == 0.0
    assert profile.get_altitude(5.0) == 50.0


def test_reconcile_skips_missing_samples():
    profile = FlightProfile(time_step=1.0)
    for t in (0, 1, 2, 5, 6):
        profile.put_velocity(float(t), 100.0)
        profile.put_altitude(float(t), 10.0 * t)
    result = reconcile(profile.copy(), profile, max_time=10.0, max_passes=5)
    assert result.converged


def test_reconcile_rejects_zero_passes():
    fitted = _steep_profile()
    with pytest.raises(ValueError):
        reconcile(fitted.copy(), fitted, max_time=10.0, max_passes=0)


def test_adjust_altitude_integrates_before_break_even():
    fitted = _steep_profile()
    original = fitted.copy()
    adjust_altitude(original, fitted, break_even=3.0, max_time=10.0)
    assert fitted.get_altitude(0.0) == pytest.approx(100.0)
    assert fitted.get_altitude(1.0) == pytest.approx(200.0)
    assert fitted.get_altitude(2.0) == pytest.approx(300.0)
    # Original curve translated to continue from the integral
    assert fitted.get_altitude(3.0) == pytest.approx(500.0)
    assert fitted.get_altitude(9.0) == pytest.approx(1700.0)
    assert fitted.get_altitude(10.0) == pytest.approx(2000.0)


# ============================================================================
# Altitude fit
# ============================================================================

def test_fit_altitude_is_non_negative():
    altitude = TimeSeries()
    for t in range(40):
        # Dips below zero early on
        altitude.put(float(t), 3.0 * (t - 4.0) * abs(t - 4.0))
    fits = fit_altitude(altitude, (10.0, 20.0, 30.0), outer_order=4,
                        middle_order=0, middle_tag=3)
    assert len(fits) == 3
    assert min(altitude.values()) >= 0.0


def test_fit_altitude_joins_legs_smoothly():
    altitude = TimeSeries({float(t): 2.0 * t * t for t in range(61)})
    fits = fit_altitude(altitude, (20.0, 30.0, 45.0), outer_order=4,
                        middle_order=0, middle_tag=3)
    # Middle leg passes through the neighbouring legs' boundary samples
    assert fits[1](19.0) == pytest.approx(altitude.get(19.0), abs=1e-4)
    assert fits[1](30.0) == pytest.approx(altitude.get(30.0), abs=1e-4)
    # Outer legs reproduce the quadratic they were fit to
    assert fits[0](10.0) == pytest.approx(200.0, abs=1e-4)
    assert fits[2](50.0) == pytest.approx(5000.0, abs=1e-3)


# ============================================================================
# Full pipeline
# ============================================================================

class TestConditionProfile:

    def setup_method(self):
        self.config = create_test_config()
        self.raw = make_raw_profile()
        self.result = condition_profile(self.raw, self.config)

    def test_events_detected(self):
        assert tuple(self.result.events) == (20.0, 30.0, 45.0)

    def test_reconciliation_converged(self):
        assert self.result.reconciliation.converged

    def test_velocity_matches_raw_on_grid(self):
        for t in range(61):
            assert self.result.profile.get_velocity(float(t)) == self.raw.get_velocity(float(t))

    def test_altitude_non_negative(self):
        _, alt = self.result.profile.altitude.to_arrays()
        assert np.all(alt >= 0.0)

    def test_raw_profile_untouched(self):
        assert self.raw.get_altitude(25.0) == pytest.approx(2.0 * 25.0 ** 2)

    def test_time_step_from_config(self):
        assert self.result.profile.time_step == self.config.dt


def test_condition_profile_empty_raises():
    with pytest.raises(EventDetectionError):
        condition_profile(FlightProfile(time_step=1.0), create_test_config())


def test_condition_profile_non_convergence_raises():
    raw = make_raw_profile()
    config = create_test_config(max_reconcile_passes=1)
    # Velocity far too low to explain the climb forces repeated corrections
    for t in range(61):
        raw.put_altitude(float(t), 50.0 * t * t)
    with pytest.raises(ReconciliationError):
        condition_profile(raw, config)
