import logging

import numpy as np
import pytest

from liftoff_sim.config import create_test_config
from liftoff_sim.control import PIDFController
from liftoff_sim.flight_profile import FlightProfile
from liftoff_sim.replay import create_replay_body, replay_step, run_telemetry_replay
from liftoff_sim.sync import CompletionLatch


def _profile(samples):
    profile = FlightProfile(time_step=1.0)
    for t, (v, h) in samples.items():
        profile.put_velocity(t, v)
        profile.put_altitude(t, h)
    return profile


def test_replay_body_carries_liftoff_mass():
    config = create_test_config()
    body = create_replay_body(config)
    assert body.mass == pytest.approx(config.initial_mass)


def test_liftoff_step_is_vertical():
    config = create_test_config()
    body = create_replay_body(config)
    pidf = PIDFController(config.dt)
    setpoint, _ = replay_step(body, pidf, _profile({0.0: (50.0, 0.0)}), 0.0, config)
    assert setpoint == 0.0
    np.testing.assert_allclose(body.velocity, [0.0, 50.0])
    np.testing.assert_allclose(body.position, [0.0, 50.0])


def test_step_closes_altitude_error():
    config = create_test_config()
    body = create_replay_body(config)
    pidf = PIDFController(config.dt)
    profile = _profile({0.0: (10.0, 0.0), 1.0: (50.0, 40.0)})
    replay_step(body, pidf, profile, 0.0, config)   # climbs to 10 m
    replay_step(body, pidf, profile, 1.0, config)   # needs +30 m
    np.testing.assert_allclose(body.velocity, [40.0, 30.0])
    assert body.position[1] == pytest.approx(40.0)


def test_missing_sample_holds_previous_command():
    config = create_test_config()
    body = create_replay_body(config)
    pidf = PIDFController(config.dt)
    profile = _profile({0.0: (20.0, 0.0)})
    replay_step(body, pidf, profile, 0.0, config)
    setpoint, _ = replay_step(body, pidf, profile, 1.0, config)
    assert setpoint is None
    np.testing.assert_allclose(body.velocity, [0.0, 20.0])
    assert body.position[1] == pytest.approx(40.0)


def test_drag_reported_when_moving():
    config = create_test_config()
    body = create_replay_body(config)
    _, drag = replay_step(body, PIDFController(config.dt),
                          _profile({0.0: (100.0, 0.0)}), 0.0, config)
    assert drag > 0.0


class TestRunTelemetryReplay:

    def setup_method(self):
        self.config = create_test_config(replay_max_time=10.0)
        self.profile = _profile({float(t): (10.0 * t, 5.0 * t * t) for t in range(11)})

    def test_produces_component_per_step(self):
        result, log = run_telemetry_replay(self.profile, self.config)
        assert len(result.vx) == 10
        assert len(result.vy) == 10
        assert len(log) == 10
        assert log.time == [float(i) for i in range(10)]

    def test_components_preserve_speed(self):
        result, _ = run_telemetry_replay(self.profile, self.config)
        for t in range(10):
            speed = np.hypot(result.get_vx(float(t)), result.get_vy(float(t)))
            assert speed == pytest.approx(self.profile.get_velocity(float(t)))

    def test_result_wraps_conditioned_profile(self):
        result, _ = run_telemetry_replay(self.profile, self.config)
        assert result.flight is self.profile
        assert result.get_altitude(4.0) == self.profile.get_altitude(4.0)

    def test_releases_latch(self):
        latch = CompletionLatch()
        run_telemetry_replay(self.profile, self.config, latch=latch)
        assert latch.released
        assert latch.error is None

    def test_observer_sees_every_step(self):
        seen = []
        run_telemetry_replay(self.profile, self.config, observer=seen.append)
        assert [s.t for s in seen] == [float(i) for i in range(1, 11)]

    def test_failure_releases_latch_with_error(self):
        latch = CompletionLatch()

        def explode(state):
            raise RuntimeError("observer failed")

        with pytest.raises(RuntimeError):
            run_telemetry_replay(self.profile, self.config, latch=latch, observer=explode)
        assert latch.released
        assert isinstance(latch.error, RuntimeError)

    def test_verbose_logs_progress(self, caplog):
        config = create_test_config(replay_max_time=10.0, verbose=True, progress_interval=5.0)
        with caplog.at_level(logging.INFO, logger='liftoff_sim.replay'):
            run_telemetry_replay(self.profile, config)
        assert "Starting telemetry replay" in caplog.text
        assert "Replay t=5s" in caplog.text
        assert "Telemetry replay complete" in caplog.text

    def test_quiet_run_skips_progress(self, caplog):
        with caplog.at_level(logging.INFO, logger='liftoff_sim.replay'):
            run_telemetry_replay(self.profile, self.config)
        assert "Starting telemetry replay" not in caplog.text
        assert "Telemetry replay complete" not in caplog.text
