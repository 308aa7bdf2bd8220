"""
Liftoff Flight Replay - Force-Driven Dynamics

Flies the Rocket so that its velocity tracks the (vx, vy) profile extracted
by the telemetry replay:

- Throttle: the force needed to cancel the velocity error within one step,
  F = m * |v_target - v| / dt, shared equally by the engines
- Thrust direction: along the velocity error, vertical without a target
- Weight: m * g0 with the current step's mass
- Drag: quadratic, opposing the velocity
- Normal force: on the ground, cancels every downward force component

Execution order per timestep:
1. Ground contact velocity reset
2. Throttle command, stage separation, engine cutoff
3. Thrust and propellant drain
4. Weight, drag, normal force
5. Sum forces, integrate, finite-difference jerk
6. Validate
"""

import logging
import time
from typing import Callable, Optional, Tuple

import numpy as np

from .config import SimulationConfig, create_default_config
from .flight_profile import VelocityProfile
from .forces import (
    compute_drag_force, compute_normal_force, compute_thrust_force, compute_weight_force,
)
from .propulsion import Rocket, create_falcon9
from .recording import SimulationLog
from .state import KinematicState
from .types import ForceBreakdown
from .utils import is_missing
from .validation import ValidationError, validate_rocket

logger = logging.getLogger(__name__)

StepObserver = Callable[[KinematicState], None]


def tracking_target(profile: VelocityProfile, t: float) -> Optional[np.ndarray]:
    """Velocity target [vx, vy] at t, None when either component is missing."""
    vx = profile.get_vx(t)
    vy = profile.get_vy(t)
    if is_missing(vx) or is_missing(vy):
        return None
    return np.array([vx, vy], dtype=np.float64)


def command_throttle(rocket: Rocket, velocity_error: np.ndarray, dt: float) -> float:
    """
    Set each engine's throttle to cancel the velocity error in one step.

    Returns:
        Requested throttle before clamping
    """
    if not rocket.engines:
        return 0.0
    accel = float(np.linalg.norm(velocity_error)) / dt
    force = rocket.mass * accel
    per_engine = force / len(rocket.engines)
    requested = 0.0
    for engine in rocket.engines:
        requested = per_engine / engine.max_thrust
        engine.set_throttle(requested)
    return requested


def is_on_ground(rocket: Rocket) -> bool:
    return rocket.position[1] <= 0.0


def dynamics_step(rocket: Rocket, profile: VelocityProfile, t: float,
                  config: SimulationConfig) -> ForceBreakdown:
    """
    Advance the rocket by one tick at profile time t.

    Args:
        rocket: Force-driven rocket
        profile: Velocity components to track
        t: Profile time of this step (s)
        config: Simulation configuration

    Returns:
        Forces applied during the step
    """
    dt = config.dt
    rocket.pre_compute()

    on_ground = is_on_ground(rocket)
    if on_ground and rocket.velocity[1] < 0:
        rocket.set_velocity(np.zeros(2))

    target = tracking_target(profile, t)
    velocity_error = None
    if target is not None:
        velocity_error = target - rocket.velocity
        command_throttle(rocket, velocity_error, dt)

    if t >= config.stage_separation_time:
        rocket.separate_stage()
    if t > config.engine_cutoff_time:
        rocket.set_throttle(0.0)

    if rocket.has_propellant:
        thrust = rocket.thrust
        rocket.burn(dt)
        rocket.set_force('thrust', compute_thrust_force(thrust, velocity_error))
    else:
        logger.debug(f"No propellant at t={t:.1f}s, coasting")
        rocket.set_force('thrust', np.zeros(2))

    rocket.set_force('weight', compute_weight_force(rocket.mass))
    rocket.set_force('drag', compute_drag_force(config.drag_coefficient, rocket.position[1],
                                                rocket.velocity, config.reference_area))

    if on_ground:
        others = [rocket.get_force(name) for name in ('weight', 'drag', 'thrust')]
        rocket.set_force('normal', compute_normal_force(others))
    else:
        rocket.set_force('normal', np.zeros(2))

    rocket.compute_forces()
    rocket.compute_motion()
    rocket.post_compute()
    return rocket.force_breakdown()


def run_dynamics_simulation(profile: VelocityProfile,
                            config: Optional[SimulationConfig] = None,
                            rocket: Optional[Rocket] = None,
                            observer: Optional[StepObserver] = None
                            ) -> Tuple[Rocket, SimulationLog]:
    """
    Fly the rocket against a velocity profile.

    Args:
        profile: Output of the telemetry replay
        config: Simulation configuration
        rocket: Vehicle to fly (default: create_falcon9(config))
        observer: Called with a state snapshot after every step

    Returns:
        Tuple of (final Rocket, SimulationLog)

    Raises:
        ValidationError: If the state becomes non-physical
    """
    if config is None:
        config = create_default_config()
    if rocket is None:
        rocket = create_falcon9(config)

    # Resting on the pad
    rocket.set_force('weight', compute_weight_force(rocket.mass))
    rocket.set_force('normal', -rocket.get_force('weight'))

    log = SimulationLog()
    steps = int(round(config.dynamics_duration / config.dt))
    if config.verbose:
        logger.info(f"Starting dynamics simulation: dt={config.dt}s, "
                    f"duration={config.dynamics_duration}s, mass={rocket.mass:.0f}kg")
    start_time = time.time()
    last_print_time = 0.0
    cutoff_logged = False
    exhaustion_logged = False

    for i in range(steps):
        t = i * config.dt

        if not cutoff_logged and t > config.engine_cutoff_time:
            logger.info(f"MECO at t={t:.1f}s: propellant remaining "
                        f"{rocket.propellant_mass:.0f} kg")
            cutoff_logged = True

        forces = dynamics_step(rocket, profile, t, config)

        if not exhaustion_logged and not rocket.has_propellant:
            logger.warning(f"Propellant exhausted at t={t:.1f}s, "
                           f"altitude={rocket.position[1] / 1000:.2f}km")
            exhaustion_logged = True

        try:
            validate_rocket(rocket)
        except ValidationError as e:
            logger.error(f"Validation failed: {e}")
            raise

        throttle = rocket.engines[0].throttle if rocket.engines else 0.0
        log.append(t, rocket.state, rocket.mass,
                   propellant=rocket.propellant_mass, throttle=throttle,
                   thrust=forces['thrust_magnitude'], drag=forces['drag_magnitude'])

        if observer is not None:
            observer(rocket.snapshot())

        if config.verbose and t - last_print_time >= config.progress_interval:
            logger.info(f"t={t:.0f}s: alt={rocket.position[1] / 1000:.2f}km, "
                        f"m={rocket.mass:.0f}kg, throttle={throttle:.2f}")
            last_print_time = t

    elapsed = time.time() - start_time
    if config.verbose:
        logger.info(f"Dynamics simulation complete: {steps} steps in {elapsed:.2f}s")
        logger.info(f"Final state: alt={rocket.position[1] / 1000:.2f}km, "
                    f"downrange={rocket.position[0] / 1000:.2f}km, "
                    f"v={np.linalg.norm(rocket.velocity):.1f}m/s")
    return rocket, log
