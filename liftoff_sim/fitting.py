"""
Liftoff Flight Replay - Constrained Polynomial Curve Fit

Least-squares polynomial regression where a set of forced points must be
satisfied exactly. A forced point pins either the value or a derivative of
the polynomial at a given time; they are used to stitch separately fitted
legs of the trajectory together without jumps or kinks.

The constrained problem

    minimise ||A c - y||^2  subject to  B c = d

is solved through its KKT system:

    | 2 A^T A   B^T | | c |   | 2 A^T y |
    |    B       0  | | l | = |    d    |

Time is normalised to u = (t - offset) / scale before building A and B so
the Vandermonde columns stay well conditioned over a 500 s flight.
"""

from dataclasses import dataclass
from math import factorial
from typing import List, NamedTuple, Sequence

import numpy as np
from numpy.polynomial import polynomial as P

from . import constants as C
from .timeseries import TimeSeries


class FitError(Exception):
    """Raised when a constrained fit is underdetermined or inconsistent."""
    pass


class ForcedPoint(NamedTuple):
    """
    A constraint the fit must satisfy exactly.

    Attributes:
        time: Time of the constraint (s)
        target: Required value, or derivative value for derivative constraints
        tag: 0 (or positive) for a value constraint; -k constrains the k-th
             derivative
    """
    time: float
    target: float
    tag: int = 0

    @property
    def derivative_order(self) -> int:
        return -self.tag if self.tag < 0 else 0


@dataclass(frozen=True)
class Polynomial:
    """
    Polynomial in normalised time u = (t - offset) / scale.

    Attributes:
        coefficients: Ascending-power coefficients in u
        offset: Time shift (s)
        scale: Time scale (s)
    """
    coefficients: np.ndarray
    offset: float = 0.0
    scale: float = 1.0

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def _u(self, t):
        return (np.asarray(t, dtype=np.float64) - self.offset) / self.scale

    def value(self, t):
        """Evaluate the polynomial at t (scalar or array)."""
        result = P.polyval(self._u(t), self.coefficients)
        return float(result) if np.ndim(result) == 0 else result

    def __call__(self, t):
        return self.value(t)

    def derivative(self, t, order: int = 1):
        """Evaluate the order-th time derivative at t."""
        if order < 0:
            raise ValueError(f"Derivative order must be non-negative, got {order}")
        if order == 0:
            return self.value(t)
        if order > self.degree:
            return 0.0 if np.ndim(t) == 0 else np.zeros(np.shape(t))
        coeffs = P.polyder(self.coefficients, order)
        result = P.polyval(self._u(t), coeffs) / self.scale ** order
        return float(result) if np.ndim(result) == 0 else result


def _constraint_row(u: float, n: int, order: int, scale: float) -> np.ndarray:
    """Row of d^order/dt^order [1, u, u^2, ...] evaluated at u."""
    row = np.zeros(n)
    for j in range(order, n):
        row[j] = factorial(j) / factorial(j - order) * u ** (j - order)
    return row / scale ** order


def fit(order: int, times: Sequence[float], values: Sequence[float],
        forced_points: Sequence[ForcedPoint] = ()) -> Polynomial:
    """
    Fit a least-squares polynomial that honours every forced point exactly.

    The polynomial degree is order + len(forced_points), so each constraint
    consumes one extra coefficient instead of the fit's freedom.

    Args:
        order: Base polynomial order (>= 0)
        times: Sample times (s)
        values: Sample values
        forced_points: Exact value/derivative constraints

    Returns:
        Fitted Polynomial

    Raises:
        FitError: If the system is underdetermined, over-constrained, singular
                  or the inputs are inconsistent
    """
    if order < 0:
        raise FitError(f"Polynomial order must be non-negative, got {order}")

    t = np.asarray(times, dtype=np.float64)
    y = np.asarray(values, dtype=np.float64)
    if t.shape != y.shape or t.ndim != 1:
        raise FitError(f"times and values must be equal-length 1-D sequences, "
                       f"got shapes {t.shape} and {y.shape}")
    if not (np.all(np.isfinite(t)) and np.all(np.isfinite(y))):
        raise FitError("times and values must be finite")

    forced = list(forced_points)
    degree = order + len(forced)
    n = degree + 1

    if len(forced) > n:
        raise FitError(f"{len(forced)} forced points over-constrain a degree {degree} polynomial")
    n_distinct = len(np.unique(t))
    if n_distinct + len(forced) < n:
        raise FitError(
            f"Underdetermined fit: degree {degree} needs {n} conditions, "
            f"got {n_distinct} distinct samples and {len(forced)} forced points")

    all_times = np.concatenate([t, [fp.time for fp in forced]])
    offset = float(np.min(all_times))
    span = float(np.max(all_times) - offset)
    scale = span if span > C.ZERO_TOLERANCE else 1.0

    u = (t - offset) / scale
    A = np.vander(u, n, increasing=True)
    B = np.array([_constraint_row((fp.time - offset) / scale, n, fp.derivative_order, scale)
                  for fp in forced]).reshape(len(forced), n)
    d = np.array([fp.target for fp in forced], dtype=np.float64)

    k = len(forced)
    kkt = np.zeros((n + k, n + k))
    kkt[:n, :n] = 2.0 * A.T @ A
    kkt[:n, n:] = B.T
    kkt[n:, :n] = B
    rhs = np.concatenate([2.0 * A.T @ y, d])

    try:
        solution = np.linalg.solve(kkt, rhs)
    except np.linalg.LinAlgError as e:
        raise FitError(f"Singular constrained fit (degree {degree}, {k} forced points): {e}") from e

    coefficients = solution[:n]
    if k:
        residual = B @ coefficients - d
        tolerance = 1e-6 * max(1.0, float(np.max(np.abs(d))))
        if not np.all(np.isfinite(residual)) or np.max(np.abs(residual)) > tolerance:
            raise FitError("Forced points are inconsistent and cannot all be satisfied")

    return Polynomial(coefficients=coefficients, offset=offset, scale=scale)


def collect_forced_points(series: TimeSeries, times: Sequence[float],
                          tag: int) -> List[ForcedPoint]:
    """
    Build forced points from the end of a leg.

    The sign of tag picks the end of the leg: positive uses its first time,
    negative its last. |tag| == 1 pins the series value there; |tag| > 1 also
    pins derivatives 1 .. |tag|-1, estimated by one-sided finite differences
    of the series over the leg's samples.

    Args:
        series: Series holding the values to match
        times: Sample times of the leg whose end is matched
        tag: Signed smoothness requirement

    Returns:
        List of ForcedPoint, value constraint first
    """
    if tag == 0:
        raise ValueError("Forced point tag must be non-zero")

    count = abs(tag)
    leg = list(times)
    if len(leg) < count:
        raise FitError(f"Leg has {len(leg)} samples, need {count} to force tag {tag}")

    window = leg[:count] if tag > 0 else leg[-count:]
    values = series.sample(window)
    if np.any(np.isnan(values)):
        raise FitError(f"Missing samples near t={window[0]:.3f}s for forced points")

    anchor = window[0] if tag > 0 else window[-1]
    points = [ForcedPoint(anchor, float(values[0] if tag > 0 else values[-1]), 0)]
    if count > 1:
        h = window[1] - window[0]
        for k in range(1, count):
            diffs = np.diff(values if tag > 0 else values[-(k + 1):], n=k)
            estimate = (diffs[0] if tag > 0 else diffs[-1]) / h ** k
            points.append(ForcedPoint(anchor, float(estimate), -k))
    return points
