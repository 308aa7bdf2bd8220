"""
Liftoff Flight Replay Package

Reconstructs a launch's flight profile from recorded telemetry, conditions it
into a consistent velocity/altitude history, replays it kinematically and
flies a multi-engine rocket model against the extracted velocity profile.

Modules:
    - constants: Physical constants and vehicle parameters
    - config: SimulationConfig dataclass
    - timeseries: Time-indexed samples and linear interpolation
    - events: MECO/SES/SECO detection and leg segmentation
    - fitting: Constrained least-squares polynomial fit
    - flight_profile: FlightProfile and VelocityProfile
    - telemetry: JSON-lines telemetry ingestion
    - conditioning: Leg-wise altitude fit and reconciliation
    - state: Kinematic derivative chain
    - integrators: Velocity- or force-driven Body
    - forces: Atmosphere, drag, weight, normal and thrust forces
    - propulsion: Engines and the Rocket body
    - control: PIDF controller and velocity decomposition
    - sync: Single-use completion gate
    - replay: Telemetry replay simulation
    - dynamics: Force-driven dynamics simulation
    - validation: Physics validation checks
    - main: Mission entry point
"""

from .config import SimulationConfig, create_default_config, create_test_config
from .flight_profile import FlightProfile, VelocityProfile
from .main import MissionResult, load_flight_profile, run_mission
from .recording import SimulationLog
from .state import KinematicState

__version__ = "1.0.0"
__author__ = "Liftoff Simulation Team"

__all__ = [
    'SimulationConfig',
    'create_default_config',
    'create_test_config',
    'FlightProfile',
    'VelocityProfile',
    'MissionResult',
    'load_flight_profile',
    'run_mission',
    'SimulationLog',
    'KinematicState',
]
