"""
Liftoff Flight Replay - Time-Series Store

This module implements the ordered time -> value store used for every
telemetry channel, and linear interpolation between stores.

Missing samples are explicit: get() returns None for any time without a
sample. Bulk numpy views use NaN in place of missing values.
"""

import bisect
import math
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from . import constants as C


def _key(time: float) -> float:
    """Normalise a time so values computed as i * dt address the same sample."""
    return round(float(time), C.TIME_KEY_DECIMALS)


class TimeSeries:
    """
    Ordered mapping from time (s) to a scalar value.

    Keys are unique and kept in ascending order. Lookups for times that were
    never recorded (including anything outside the recorded range) return
    None.
    """

    def __init__(self, samples: Optional[Dict[float, float]] = None):
        self._values: Dict[float, float] = {}
        self._times: List[float] = []
        if samples:
            for t, v in samples.items():
                self.put(t, v)

    def put(self, time: float, value: float) -> None:
        """Insert a sample, overwriting any existing sample at that time."""
        if math.isnan(time) or time < 0.0:
            raise ValueError(f"Sample time must be a non-negative number, got {time}")
        key = _key(time)
        if key not in self._values:
            if not self._times or key > self._times[-1]:
                self._times.append(key)
            else:
                bisect.insort(self._times, key)
        self._values[key] = float(value)

    def get(self, time: float) -> Optional[float]:
        """Exact sample at time, or None when nothing was recorded there."""
        return self._values.get(_key(time))

    def __contains__(self, time: float) -> bool:
        return _key(time) in self._values

    def __len__(self) -> int:
        return len(self._times)

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for t in self._times:
            yield t, self._values[t]

    def __repr__(self) -> str:
        if not self._times:
            return "TimeSeries(empty)"
        return (f"TimeSeries(n={len(self)}, "
                f"t=[{self.first_time:.3f}, {self.last_time:.3f}])")

    @property
    def first_time(self) -> Optional[float]:
        return self._times[0] if self._times else None

    @property
    def last_time(self) -> Optional[float]:
        return self._times[-1] if self._times else None

    def times(self) -> List[float]:
        """All sample times in ascending order."""
        return list(self._times)

    def values(self) -> List[float]:
        """All sample values in time order."""
        return [self._values[t] for t in self._times]

    def range(self, start: float, end: float,
              include_end: bool = False) -> List[Tuple[float, float]]:
        """
        Samples with start <= t < end (or t <= end when include_end).

        Args:
            start: Inclusive lower bound (s)
            end: Upper bound (s)
            include_end: Whether a sample exactly at end is included

        Returns:
            List of (time, value) pairs in time order
        """
        lo = bisect.bisect_left(self._times, _key(start))
        if include_end:
            hi = bisect.bisect_right(self._times, _key(end))
        else:
            hi = bisect.bisect_left(self._times, _key(end))
        return [(t, self._values[t]) for t in self._times[lo:hi]]

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray]:
        """(times, values) as float64 arrays."""
        t = np.array(self._times, dtype=np.float64)
        v = np.array([self._values[k] for k in self._times], dtype=np.float64)
        return t, v

    def sample(self, times) -> np.ndarray:
        """Values at the given times, NaN where no sample exists."""
        out = np.full(len(times), np.nan)
        for i, t in enumerate(times):
            value = self.get(t)
            if value is not None:
                out[i] = value
        return out

    def copy(self) -> 'TimeSeries':
        """Create an independent copy of the series."""
        other = TimeSeries()
        other._times = list(self._times)
        other._values = dict(self._values)
        return other

    def clear(self) -> None:
        self._times.clear()
        self._values.clear()


def interpolate_linear(target: TimeSeries, source: TimeSeries,
                       step: Optional[float] = None) -> TimeSeries:
    """
    Fill target with linearly interpolated samples of source.

    With step=None one sample is written per key of source. Otherwise a sample
    is written at every multiple of step inside [source.first_time,
    source.last_time]. Each value is the linear interpolation between the two
    nearest original samples, so original samples on the output grid are
    reproduced exactly. Nothing is written outside the source domain.

    Args:
        target: Series to write into (may be source itself when step is None)
        source: Original samples
        step: Optional fixed output spacing (s)

    Returns:
        The target series
    """
    if len(source) == 0:
        return target

    xp, fp = source.to_arrays()
    if step is None:
        grid = xp
    else:
        if step <= 0:
            raise ValueError(f"Interpolation step must be positive, got {step}")
        first = int(math.ceil(round(xp[0] / step, C.TIME_KEY_DECIMALS)))
        last = int(math.floor(round(xp[-1] / step, C.TIME_KEY_DECIMALS)))
        grid = np.array([i * step for i in range(first, last + 1)], dtype=np.float64)

    values = np.interp(grid, xp, fp)
    for t, v in zip(grid, values):
        # Exact reproduction of original samples on the grid
        original = source.get(t)
        target.put(t, original if original is not None else v)
    return target
