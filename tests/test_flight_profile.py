import pytest

from liftoff_sim.flight_profile import FlightProfile, VelocityProfile


def test_profile_requires_positive_step():
    with pytest.raises(ValueError):
        FlightProfile(time_step=0.0)


def test_profile_put_get():
    p = FlightProfile(time_step=1.0)
    p.put_velocity(2.0, 100.0)
    p.put_altitude(2.0, 500.0)
    assert p.get_velocity(2.0) == 100.0
    assert p.get_altitude(2.0) == 500.0
    assert p.get_velocity(3.0) is None


def test_profile_max_time_and_empty():
    p = FlightProfile(time_step=1.0)
    assert p.is_empty()
    assert p.max_time is None
    p.put_velocity(4.0, 1.0)
    p.put_altitude(7.0, 1.0)
    assert not p.is_empty()
    assert p.max_time == 7.0


def test_profile_copy_is_deep():
    p = FlightProfile(time_step=1.0, ballistic_range=1000.0)
    p.put_altitude(0.0, 1.0)
    c = p.copy()
    c.put_altitude(0.0, 2.0)
    assert p.get_altitude(0.0) == 1.0
    assert c.ballistic_range == 1000.0


def test_ballistic_range():
    p = FlightProfile(time_step=1.0)
    p.set_ballistic_range(651000.0)
    assert p.ballistic_range == 651000.0


def test_velocity_profile_delegates_to_flight():
    flight = FlightProfile(time_step=0.5)
    flight.put_velocity(1.0, 50.0)
    flight.put_altitude(1.0, 20.0)
    vp = VelocityProfile(flight=flight)
    vp.put_vx(1.0, 30.0)
    vp.put_vy(1.0, 40.0)
    assert vp.time_step == 0.5
    assert vp.get_vx(1.0) == 30.0
    assert vp.get_vy(1.0) == 40.0
    assert vp.get_velocity(1.0) == 50.0
    assert vp.get_altitude(1.0) == 20.0
    assert vp.get_vx(2.0) is None
