"""Tests for config module."""
from dataclasses import replace

import pytest
from liftoff_sim import config
from liftoff_sim import constants as C


def test_simulation_config_defaults():
    """Test that default config uses constants values."""
    cfg = config.SimulationConfig()
    assert cfg.dt == C.DT
    assert cfg.replay_max_time == C.REPLAY_MAX_TIME
    assert cfg.dynamics_duration == C.DYNAMICS_DURATION
    assert cfg.num_engines == C.NUM_ENGINES
    assert cfg.engine_isp == C.ENGINE_ISP
    assert cfg.ballistic_range == C.BALLISTIC_RANGE
    assert cfg.progress_interval == C.PROGRESS_INTERVAL


def test_simulation_config_custom_values():
    """Test creating config with custom values."""
    cfg = config.SimulationConfig(dt=0.5, dynamics_duration=100.0, verbose=False)
    assert cfg.dt == 0.5
    assert cfg.dynamics_duration == 100.0
    assert cfg.verbose is False


def test_simulation_config_frozen():
    """Test that config is immutable (frozen)."""
    cfg = config.SimulationConfig()
    with pytest.raises(Exception):  # FrozenInstanceError
        cfg.dt = 0.5


def test_replace_creates_variant():
    cfg = config.create_default_config()
    variant = replace(cfg, drag_coefficient=0.0)
    assert variant.drag_coefficient == 0.0
    assert cfg.drag_coefficient == C.DRAG_COEFFICIENT


def test_derived_masses():
    cfg = config.SimulationConfig()
    assert cfg.upper_stage_mass == pytest.approx(C.UPPER_STAGE_MASS)
    assert cfg.initial_mass == pytest.approx(C.INITIAL_MASS)


def test_derived_masses_follow_overrides():
    cfg = config.SimulationConfig(payload_mass=0.0)
    assert cfg.upper_stage_mass == pytest.approx(C.STAGE2_DRY_MASS + C.STAGE2_PROPELLANT_MASS)


def test_create_default_config():
    """Test create_default_config factory function."""
    cfg = config.create_default_config()
    assert isinstance(cfg, config.SimulationConfig)
    assert cfg.dt == C.DT


def test_create_test_config():
    """Test create_test_config factory function."""
    cfg = config.create_test_config()
    assert cfg.dt == 1.0
    assert cfg.replay_max_time == 60.0
    assert cfg.dynamics_duration == 30.0
    assert cfg.verbose is False


def test_create_test_config_overrides():
    cfg = config.create_test_config(dt=0.5, max_reconcile_passes=3)
    assert cfg.dt == 0.5
    assert cfg.max_reconcile_passes == 3
