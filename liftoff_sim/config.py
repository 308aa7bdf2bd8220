"""
Liftoff Flight Replay - Configuration

This module provides a SimulationConfig dataclass for dependency injection,
allowing different simulation parameters to be passed without modifying
global constants.
"""

from dataclasses import dataclass

from . import constants as C


@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable configuration for simulation parameters.

    Using frozen=True ensures configs cannot be accidentally modified.
    Create new configs via dataclass replace() if needed.

    Section grouping:
      1. Simulation timing
      2. Profile conditioning
      3. Vehicle masses
      4. Propulsion
      5. Aerodynamics
      6. Mission events
      7. Control gains
      8. Misc
    """

    # ── 1. Simulation timing ─────────────────────────────────────────────
    dt: float = C.DT
    replay_max_time: float = C.REPLAY_MAX_TIME
    dynamics_duration: float = C.DYNAMICS_DURATION
    derivative_depth: int = C.DERIVATIVE_DEPTH

    # ── 2. Profile conditioning ──────────────────────────────────────────
    outer_leg_order: int = C.OUTER_LEG_ORDER
    middle_leg_order: int = C.MIDDLE_LEG_ORDER
    middle_leg_force_tag: int = C.MIDDLE_LEG_FORCE_TAG
    max_reconcile_passes: int = C.MAX_RECONCILE_PASSES
    ballistic_range: float = C.BALLISTIC_RANGE

    # ── 3. Vehicle masses ────────────────────────────────────────────────
    stage1_dry_mass: float = C.STAGE1_DRY_MASS
    stage1_propellant_mass: float = C.STAGE1_PROPELLANT_MASS
    stage2_dry_mass: float = C.STAGE2_DRY_MASS
    stage2_propellant_mass: float = C.STAGE2_PROPELLANT_MASS
    payload_mass: float = C.PAYLOAD_MASS

    # ── 4. Propulsion ────────────────────────────────────────────────────
    num_engines: int = C.NUM_ENGINES
    engine_max_thrust: float = C.ENGINE_MAX_THRUST
    engine_isp: float = C.ENGINE_ISP

    # ── 5. Aerodynamics ──────────────────────────────────────────────────
    drag_coefficient: float = C.DRAG_COEFFICIENT
    reference_area: float = C.REFERENCE_AREA

    # ── 6. Mission events ────────────────────────────────────────────────
    engine_cutoff_time: float = C.ENGINE_CUTOFF_TIME
    stage_separation_time: float = C.STAGE_SEPARATION_TIME

    # ── 7. Control gains ─────────────────────────────────────────────────
    kp_velocity: float = C.KP_VELOCITY
    ki_velocity: float = C.KI_VELOCITY
    kd_velocity: float = C.KD_VELOCITY
    kf_velocity: float = C.KF_VELOCITY

    # ── 8. Misc ──────────────────────────────────────────────────────────
    verbose: bool = True
    progress_interval: float = C.PROGRESS_INTERVAL

    @property
    def upper_stage_mass(self) -> float:
        """Mass carried above the interstage until separation (kg)."""
        return self.stage2_dry_mass + self.stage2_propellant_mass + self.payload_mass

    @property
    def initial_mass(self) -> float:
        """Total liftoff mass (kg)."""
        return self.stage1_dry_mass + self.stage1_propellant_mass + self.upper_stage_mass


def create_default_config() -> SimulationConfig:
    """Create a SimulationConfig with default values from constants."""
    return SimulationConfig()


def create_test_config(dt: float = 1.0, replay_max_time: float = 60.0,
                       dynamics_duration: float = 30.0,
                       **overrides) -> SimulationConfig:
    """Create a fast config suitable for testing.

    Any keyword arg accepted by SimulationConfig can be passed as an override.
    """
    defaults = dict(dt=dt, replay_max_time=replay_max_time,
                    dynamics_duration=dynamics_duration, verbose=False)
    defaults.update(overrides)
    return SimulationConfig(**defaults)
