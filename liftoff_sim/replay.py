"""
Liftoff Flight Replay - Telemetry Replay

Drives a velocity-commanded Body through a conditioned FlightProfile. Each
step the PIDF controller compares the profile altitude with the body's
altitude and splits the recorded speed into horizontal and vertical
components; the resulting components form the VelocityProfile tracked later
by the dynamics simulation.

Execution order per timestep:
1. Snapshot previous state
2. Feed altitude to the controller, command velocity (when data exists)
3. Drag at the commanded velocity (diagnostic)
4. Integrate position, finite-difference acceleration and jerk
5. Record (vx, vy) into the VelocityProfile
"""

import logging
import time
from typing import Callable, Optional, Tuple

import numpy as np

from .config import SimulationConfig, create_default_config
from .control import PIDFController, adjust_velocity
from .flight_profile import FlightProfile, VelocityProfile
from .forces import compute_drag_force
from .integrators import Body, DriveMode
from .recording import SimulationLog
from .state import KinematicState
from .sync import CompletionLatch
from .utils import is_missing

logger = logging.getLogger(__name__)

StepObserver = Callable[[KinematicState], None]


def create_replay_body(config: SimulationConfig) -> Body:
    """Velocity-driven body carrying the full lift-off mass."""
    return Body(config.initial_mass, mode=DriveMode.VELOCITY,
                derivatives=config.derivative_depth, time_step=config.dt)


def create_velocity_controller(config: SimulationConfig) -> PIDFController:
    return PIDFController(config.dt, kp=config.kp_velocity, ki=config.ki_velocity,
                          kd=config.kd_velocity, kf=config.kf_velocity)


def replay_step(body: Body, pidf: PIDFController, profile: FlightProfile,
                t: float, config: SimulationConfig) -> Tuple[Optional[float], float]:
    """
    Advance the replay body by one tick at profile time t.

    Steps where either the speed or the altitude is missing keep the
    previous velocity command.

    Returns:
        Tuple of (altitude setpoint or None, drag magnitude in N)
    """
    body.pre_compute()
    pidf.set_last_state(body.position[1])

    speed = profile.get_velocity(t)
    altitude = profile.get_altitude(t)
    setpoint = None
    if not is_missing(speed) and not is_missing(altitude):
        setpoint = altitude
        pidf.set_setpoint(altitude)
        body.set_velocity(adjust_velocity(pidf, speed))
    else:
        logger.debug(f"No telemetry at t={t:.1f}s, holding velocity command")

    drag = compute_drag_force(config.drag_coefficient, body.position[1],
                              body.velocity, config.reference_area)

    body.compute_motion()
    body.post_compute()
    return setpoint, float(np.linalg.norm(drag))


def run_telemetry_replay(profile: FlightProfile,
                         config: Optional[SimulationConfig] = None,
                         latch: Optional[CompletionLatch] = None,
                         observer: Optional[StepObserver] = None
                         ) -> Tuple[VelocityProfile, SimulationLog]:
    """
    Replay a conditioned flight profile and extract velocity components.

    Args:
        profile: Conditioned FlightProfile
        config: Simulation configuration
        latch: Released once after the final step (with the error on failure)
        observer: Called with a state snapshot after every step

    Returns:
        Tuple of (VelocityProfile, SimulationLog)
    """
    if config is None:
        config = create_default_config()

    try:
        body = create_replay_body(config)
        pidf = create_velocity_controller(config)
        result = VelocityProfile(flight=profile)
        log = SimulationLog()

        steps = int(round(config.replay_max_time / config.dt))
        if config.verbose:
            logger.info(f"Starting telemetry replay: dt={config.dt}s, "
                        f"max_time={config.replay_max_time}s")
        start_time = time.time()
        last_print_time = 0.0

        for i in range(steps):
            t = i * config.dt
            setpoint, drag = replay_step(body, pidf, profile, t, config)

            velocity = body.velocity
            result.put_vx(t, float(velocity[0]))
            result.put_vy(t, float(velocity[1]))
            log.append(t, body.state, body.mass, drag=drag,
                       setpoint=float('nan') if setpoint is None else setpoint)

            if observer is not None:
                observer(body.snapshot())

            if config.verbose and t - last_print_time >= config.progress_interval:
                logger.info(f"Replay t={t:.0f}s: alt={body.position[1] / 1000:.2f}km, "
                            f"vx={velocity[0]:.1f}m/s, vy={velocity[1]:.1f}m/s")
                last_print_time = t

        elapsed = time.time() - start_time
        if config.verbose:
            logger.info(f"Telemetry replay complete: {steps} steps in {elapsed:.2f}s")
    except Exception as e:
        if latch is not None:
            latch.release(e)
        raise

    if latch is not None:
        latch.release()
    return result, log
