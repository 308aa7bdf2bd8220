import numpy as np
import pytest

from liftoff_sim.state import KinematicState
from liftoff_sim import constants as C


def test_zero_state():
    s = KinematicState.zero()
    assert s.depth == C.DERIVATIVE_DEPTH
    assert s.t == 0.0
    for d in s.derivatives:
        np.testing.assert_array_equal(d, np.zeros(2))


def test_named_accessors():
    s = KinematicState(derivatives=[[1.0, 2.0], [3.0, 4.0], [5.0, 6.0], [7.0, 8.0]], t=2.0)
    np.testing.assert_array_equal(s.position, [1.0, 2.0])
    np.testing.assert_array_equal(s.velocity, [3.0, 4.0])
    np.testing.assert_array_equal(s.acceleration, [5.0, 6.0])
    np.testing.assert_array_equal(s.jerk, [7.0, 8.0])
    assert s.downrange == 1.0
    assert s.altitude == 2.0
    assert s.speed == pytest.approx(5.0)


def test_shallow_chain_reports_zero_higher_derivatives():
    s = KinematicState(derivatives=[[0.0, 0.0], [1.0, 1.0]])
    np.testing.assert_array_equal(s.acceleration, np.zeros(2))
    np.testing.assert_array_equal(s.jerk, np.zeros(2))


def test_vectors_converted_to_float_arrays():
    s = KinematicState(derivatives=[[1, 2], [3, 4]])
    assert s.position.dtype == np.float64


def test_invalid_depth():
    with pytest.raises(ValueError):
        KinematicState(derivatives=[[0.0, 0.0]])


def test_invalid_shape():
    with pytest.raises(ValueError):
        KinematicState(derivatives=[[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]])


def test_copy_is_deep():
    s = KinematicState.zero()
    c = s.copy()
    c.derivatives[0][1] = 100.0
    c.t = 5.0
    assert s.position[1] == 0.0
    assert s.t == 0.0


def test_str():
    s = KinematicState(derivatives=[[2000.0, 5000.0], [0.0, 10.0]], t=1.5)
    text = str(s)
    assert "t=1.50s" in text
    assert "alt=5.00km" in text
