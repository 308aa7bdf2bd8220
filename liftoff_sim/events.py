"""
Liftoff Flight Replay - Event Detection & Segmentation

Stage transitions show up in the velocity trace as trend reversals:
- MECO: velocity peaks, then falls while the stack coasts
- SES: velocity bottoms out when the second engine starts
- SECO: velocity peaks again at second engine cutoff

The detected event times split the trajectory into legs that are curve fit
separately.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .timeseries import TimeSeries
from .utils import signum

logger = logging.getLogger(__name__)


class EventDetectionError(Exception):
    """Raised when the expected MECO/SES/SECO sequence cannot be found."""
    pass


class FlightEvents(NamedTuple):
    """Detected stage-transition times (s)."""
    meco: float
    ses: float
    seco: float


def find_event(series: TimeSeries, start: float, expect_max: bool) -> Optional[float]:
    """
    Find the first trend reversal at or after start.

    Flat stretches carry the previous trend, so a plateau followed by a drop
    is still recognised as a maximum at the last sample before the drop.

    Args:
        series: Samples to scan
        start: Time to begin scanning from
        expect_max: True to look for a local maximum, False for a minimum

    Returns:
        Time of the extremum, or None if the trend never reverses
    """
    samples = series.range(start, series.last_time, include_end=True) if len(series) else []
    trend = 0
    for i in range(len(samples) - 1):
        t, value = samples[i]
        direction = signum(samples[i + 1][1] - value)
        if expect_max and trend > 0 and direction < 0:
            return t
        if not expect_max and trend < 0 and direction > 0:
            return t
        if direction != 0:
            trend = direction
    return None


def detect_events(series: TimeSeries) -> FlightEvents:
    """
    Detect MECO, SES and SECO in a velocity series.

    Scanning starts just after the first sample; each subsequent search starts
    at the previous event.

    Raises:
        EventDetectionError: If any of the three events is missing
    """
    times = series.times()
    if len(times) < 3:
        raise EventDetectionError(
            f"Need at least 3 samples to detect events, got {len(times)}")

    meco = find_event(series, times[1], expect_max=True)
    if meco is None:
        raise EventDetectionError("No velocity maximum found for MECO")
    ses = find_event(series, meco, expect_max=False)
    if ses is None:
        raise EventDetectionError(f"No velocity minimum found after MECO (t={meco:.1f}s)")
    seco = find_event(series, ses, expect_max=True)
    if seco is None:
        raise EventDetectionError(f"No velocity maximum found after SES (t={ses:.1f}s)")

    logger.info(f"Detected events: MECO t={meco:.1f}s, SES t={ses:.1f}s, SECO t={seco:.1f}s")
    return FlightEvents(meco, ses, seco)


def segment(series: TimeSeries,
            events: Sequence[float]) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Split a series into len(events) contiguous legs.

    Leg 0 covers [start, e0), leg i covers [e(i-1), e(i)) and the last leg
    covers [e(n-2), end], taking in the coast after the final event.

    Args:
        series: Samples to partition
        events: Ascending event times

    Returns:
        List of (times, values) array pairs, one per leg
    """
    if len(events) < 2:
        raise ValueError(f"Need at least 2 events to segment, got {len(events)}")
    if any(b <= a for a, b in zip(events, events[1:])):
        raise ValueError(f"Event times must be strictly increasing: {list(events)}")
    if len(series) == 0:
        return [(np.array([]), np.array([])) for _ in events]

    bounds = [series.first_time] + list(events[:-1])
    legs = []
    for i, lo in enumerate(bounds):
        last = i == len(bounds) - 1
        hi = series.last_time if last else bounds[i + 1]
        samples = series.range(lo, hi, include_end=last)
        legs.append((np.array([t for t, _ in samples], dtype=np.float64),
                     np.array([v for _, v in samples], dtype=np.float64)))
    return legs
