"""
Liftoff Flight Replay - Profile Conditioning

Turns raw telemetry into a smooth, physically consistent flight profile:
1. Linear interpolation of velocity and altitude onto the simulation grid
2. MECO/SES/SECO detection on the velocity trace
3. Leg-wise constrained polynomial fit of the altitude
4. Reconciliation of the fitted altitude with the velocity integral

Step 4 exists because the two channels are fit independently: wherever the
recorded velocity is too small to climb to the next fitted altitude, the
altitude is replaced by the velocity integral up to that point and the rest of
the original profile is translated down to join it. The break-even time where
the two agree marks the start of the pitch-over.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Sequence

from .config import SimulationConfig, create_default_config
from .events import FlightEvents, detect_events, segment
from .fitting import Polynomial, collect_forced_points, fit
from .flight_profile import FlightProfile
from .timeseries import TimeSeries, interpolate_linear

logger = logging.getLogger(__name__)


class ReconciliationError(Exception):
    """Raised when altitude/velocity reconciliation does not converge."""
    pass


class ReconciliationResult(NamedTuple):
    """Outcome of the bounded reconciliation loop."""
    converged: bool
    passes: int
    break_even: float  # last corrected time (s), 0.0 when no correction was needed


@dataclass
class ConditioningResult:
    """Conditioned profile plus the diagnostics gathered along the way."""
    profile: FlightProfile
    events: FlightEvents
    leg_fits: List[Polynomial]
    reconciliation: ReconciliationResult


def _write_back(series: TimeSeries, times, poly: Polynomial) -> None:
    for t in times:
        series.put(t, max(0.0, poly.value(t)))


def fit_altitude(altitude: TimeSeries, events: Sequence[float],
                 outer_order: int, middle_order: int,
                 middle_tag: int) -> List[Polynomial]:
    """
    Replace the altitude samples leg by leg with constrained polynomial fits.

    The first and last legs are fit first, each pinned to the value of the
    adjacent middle leg at the shared boundary. The middle legs are fit last,
    pinned with middle_tag smoothness (value and derivatives) to the already
    fitted neighbours. Negative fitted altitudes are clamped to zero.

    Args:
        altitude: Interpolated altitude series, rewritten in place
        events: Ascending event times bounding the legs
        outer_order: Base order for the first and last legs
        middle_order: Base order for the middle legs
        middle_tag: Smoothness forced on each side of a middle leg

    Returns:
        Polynomial per leg, in leg order
    """
    legs = segment(altitude, events)
    n = len(legs)
    fits: List[Polynomial] = [None] * n

    for l in (0, n - 1):
        times, values = legs[l]
        if l == 0:
            forced = collect_forced_points(altitude, legs[1][0], 1)
        else:
            forced = collect_forced_points(altitude, legs[n - 2][0], -1)
        fits[l] = fit(outer_order, times, values, forced)

    for l in (0, n - 1):
        _write_back(altitude, legs[l][0], fits[l])

    for l in range(1, n - 1):
        times, values = legs[l]
        forced = collect_forced_points(altitude, legs[l - 1][0], -middle_tag)
        forced += collect_forced_points(altitude, legs[l + 1][0], middle_tag)
        fits[l] = fit(middle_order, times, values, forced)
        _write_back(altitude, times, fits[l])

    return fits


def adjust_altitude(original: FlightProfile, fitted: FlightProfile,
                    break_even: float, max_time: float) -> None:
    """
    Bring the fitted altitude in line with the velocity integral.

    Before break_even the altitude becomes the Euler integral of the fitted
    velocity. From break_even on, the original altitude curve is translated to
    continue from the integral, until the translated curve reaches the fitted
    curve again.

    Args:
        original: Profile as it was after curve fitting
        fitted: Profile being corrected, rewritten in place
        break_even: Time at which the integral hands over to the translation
        max_time: Upper bound of the integration range (s)
    """
    dt = fitted.time_step
    last_t = 0.0
    last_alt = 0.0
    v_integral = 0.0
    for i in range(int(round(max_time / dt))):
        t = i * dt
        alt = fitted.get_altitude(t)
        v = fitted.get_velocity(t)

        if v is not None:
            v_integral += v * dt

        if t < break_even:
            fitted.put_altitude(t, v_integral)
            last_alt = v_integral
        else:
            orig_alt = original.get_altitude(t)
            orig_last = original.get_altitude(last_t)
            if alt is None or orig_alt is None or orig_last is None:
                break

            target_alt = last_alt + (orig_alt - orig_last)
            if target_alt >= alt:
                break

            fitted.put_altitude(t, target_alt)
            last_alt = target_alt

        last_t = t


def reconcile(original: FlightProfile, fitted: FlightProfile,
              max_time: float, max_passes: int) -> ReconciliationResult:
    """
    Repeat adjust_altitude until the velocity can sustain every altitude step.

    Each pass scans from the start for the first step where
    velocity(t) < (altitude(t) - altitude(t - dt)) / dt at a time later than
    the previous correction, corrects from there and rescans. Missing samples
    are skipped.

    Args:
        original: Profile as it was after curve fitting
        fitted: Profile being corrected, rewritten in place
        max_time: Upper bound of the scan (s)
        max_passes: Maximum number of scans before giving up

    Returns:
        ReconciliationResult with the convergence flag
    """
    if max_passes < 1:
        raise ValueError(f"max_passes must be at least 1, got {max_passes}")

    dt = fitted.time_step
    total_steps = int(round(max_time / dt))
    last_corrected_time = 0.0

    for passes in range(1, max_passes + 1):
        corrected = False
        last_t = None
        last_alt = 0.0
        for i in range(total_steps):
            t = i * dt
            alt = fitted.get_altitude(t)
            v = fitted.get_velocity(t)
            if alt is None or v is None:
                continue

            if last_t is not None:
                target_v = (alt - last_alt) / (t - last_t)
                if v < target_v and last_corrected_time < t:
                    last_corrected_time = t
                    adjust_altitude(original, fitted, t, max_time)
                    corrected = True
                    break

            last_t = t
            last_alt = alt

        if not corrected:
            logger.debug(f"Reconciliation converged after {passes} passes "
                         f"(break-even t={last_corrected_time:.1f}s)")
            return ReconciliationResult(True, passes, last_corrected_time)

        logger.debug(f"Reconciliation pass {passes}: corrected at t={last_corrected_time:.1f}s")

    logger.warning(f"Reconciliation did not converge within {max_passes} passes "
                   f"(last correction at t={last_corrected_time:.1f}s)")
    return ReconciliationResult(False, max_passes, last_corrected_time)


def condition_profile(raw: FlightProfile,
                      config: SimulationConfig = None) -> ConditioningResult:
    """
    Run the full conditioning pipeline on raw telemetry.

    Args:
        raw: Profile as ingested from telemetry
        config: Simulation configuration (uses default if None)

    Returns:
        ConditioningResult holding the conditioned profile

    Raises:
        EventDetectionError: If MECO/SES/SECO cannot be found
        FitError: If a leg cannot be fit
        ReconciliationError: If reconciliation does not converge
    """
    if config is None:
        config = create_default_config()

    fitted = FlightProfile(time_step=config.dt, ballistic_range=raw.ballistic_range)

    interpolate_linear(fitted.velocity, raw.velocity, step=config.dt)
    events = detect_events(fitted.velocity)

    interpolate_linear(fitted.altitude, raw.altitude, step=config.dt)
    leg_fits = fit_altitude(fitted.altitude, events,
                            outer_order=config.outer_leg_order,
                            middle_order=config.middle_leg_order,
                            middle_tag=config.middle_leg_force_tag)

    original = fitted.copy()
    result = reconcile(original, fitted, config.replay_max_time,
                       config.max_reconcile_passes)
    if not result.converged:
        raise ReconciliationError(
            f"Altitude/velocity reconciliation did not converge in {result.passes} "
            f"passes (last correction at t={result.break_even:.1f}s)")

    logger.info(f"Conditioned profile: {fitted}, break-even t={result.break_even:.1f}s "
                f"after {result.passes} passes")
    return ConditioningResult(profile=fitted, events=events,
                              leg_fits=leg_fits, reconciliation=result)
