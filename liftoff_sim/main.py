"""
Liftoff Flight Replay - Mission Orchestration

Chains the pipeline:

    telemetry file -> raw FlightProfile -> conditioning
        -> telemetry replay (worker thread) -> VelocityProfile
        -> dynamics simulation

The replay runs on a worker thread and releases a CompletionLatch after its
final step; the dynamics simulation waits on the latch before reading the
velocity profile.
"""

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Optional, Union

from .conditioning import ConditioningResult, condition_profile
from .config import SimulationConfig, create_default_config
from .dynamics import StepObserver, run_dynamics_simulation
from .flight_profile import FlightProfile, VelocityProfile
from .propulsion import Rocket
from .recording import SimulationLog
from .replay import run_telemetry_replay
from .sync import CompletionLatch
from .telemetry import parse_telemetry

logger = logging.getLogger(__name__)


@dataclass
class MissionResult:
    """Outputs of a complete replay + dynamics run."""
    raw_profile: FlightProfile
    conditioning: ConditioningResult
    velocity_profile: VelocityProfile
    replay_log: SimulationLog
    rocket: Rocket
    dynamics_log: SimulationLog
    elapsed: float

    @property
    def profile(self) -> FlightProfile:
        """Conditioned flight profile."""
        return self.conditioning.profile


def load_flight_profile(path: Union[str, os.PathLike],
                        config: Optional[SimulationConfig] = None) -> FlightProfile:
    """
    Ingest a telemetry file into a raw FlightProfile.

    A missing file yields an empty profile (the parser logs a warning).
    """
    if config is None:
        config = create_default_config()
    profile = FlightProfile(time_step=config.dt)
    parse_telemetry(profile, path)
    profile.set_ballistic_range(config.ballistic_range)
    return profile


def run_mission(telemetry: Union[str, os.PathLike, FlightProfile],
                config: Optional[SimulationConfig] = None,
                replay_observer: Optional[StepObserver] = None,
                dynamics_observer: Optional[StepObserver] = None,
                replay_timeout: Optional[float] = None) -> MissionResult:
    """
    Condition telemetry and run both simulations.

    Args:
        telemetry: Path to a JSON-lines telemetry file, or a raw FlightProfile
        config: Simulation configuration (uses default if None)
        replay_observer: Snapshot callback for the replay body
        dynamics_observer: Snapshot callback for the rocket
        replay_timeout: Maximum wait for the replay to finish (s), None to block

    Returns:
        MissionResult

    Raises:
        EventDetectionError, FitError, ReconciliationError: From conditioning
        TimeoutError: If the replay does not finish within replay_timeout
        ValidationError: If the dynamics state becomes non-physical
    """
    if config is None:
        config = create_default_config()

    start_wall = time.time()
    if isinstance(telemetry, FlightProfile):
        raw = telemetry
    else:
        raw = load_flight_profile(telemetry, config)
    logger.info(f"Raw telemetry: {raw}")

    conditioned = condition_profile(raw, config)

    latch = CompletionLatch()
    outputs = {}

    def _replay():
        try:
            outputs['replay'] = run_telemetry_replay(conditioned.profile, config,
                                                     latch=latch, observer=replay_observer)
        except Exception as e:
            # Already handed to the waiter through the latch
            logger.error(f"Telemetry replay failed: {e}")

    worker = threading.Thread(target=_replay, name='telemetry-replay', daemon=True)
    worker.start()

    if not latch.wait(replay_timeout):
        raise TimeoutError(f"Telemetry replay did not finish within {replay_timeout}s")
    if latch.error is not None:
        raise latch.error
    worker.join()
    velocity_profile, replay_log = outputs['replay']

    rocket, dynamics_log = run_dynamics_simulation(velocity_profile, config,
                                                   observer=dynamics_observer)

    elapsed = time.time() - start_wall
    logger.info(f"Mission complete in {elapsed:.2f}s")
    return MissionResult(
        raw_profile=raw,
        conditioning=conditioned,
        velocity_profile=velocity_profile,
        replay_log=replay_log,
        rocket=rocket,
        dynamics_log=dynamics_log,
        elapsed=elapsed,
    )
