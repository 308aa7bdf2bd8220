"""Shared fixtures: a synthetic two-burn flight sampled once per second."""
import json

import pytest

from liftoff_sim.config import create_test_config
from liftoff_sim.flight_profile import FlightProfile


def synthetic_velocity(t):
    """Burn to 20 s, coast to 30 s, second burn to 45 s, then coast."""
    if t <= 20:
        return 20.0 * t
    if t <= 30:
        return 400.0 - 10.0 * (t - 20)
    if t <= 45:
        return 300.0 + 400.0 / 15.0 * (t - 30)
    return 700.0 - 5.0 * (t - 45)


def synthetic_altitude_km(t):
    return 0.002 * t * t


def make_raw_profile(duration=60, dt=1.0):
    profile = FlightProfile(time_step=dt)
    for t in range(int(duration) + 1):
        profile.put_velocity(float(t), synthetic_velocity(t))
        profile.put_altitude(float(t), synthetic_altitude_km(t) * 1000.0)
    return profile


@pytest.fixture
def test_config():
    return create_test_config()


@pytest.fixture
def raw_profile():
    return make_raw_profile()


@pytest.fixture
def telemetry_file(tmp_path):
    path = tmp_path / "telemetry.jsonl"
    with open(path, 'w') as fh:
        for t in range(61):
            record = {'time': float(t), 'velocity': synthetic_velocity(t),
                      'altitude': synthetic_altitude_km(t)}
            fh.write(json.dumps(record) + '\n')
    return path
