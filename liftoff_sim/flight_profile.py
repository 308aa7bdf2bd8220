"""
Liftoff Flight Replay - Flight Profiles

FlightProfile pairs the velocity and altitude channels of a flight at a fixed
time step. VelocityProfile is produced by the telemetry replay and carries the
horizontal/vertical velocity decomposition alongside the conditioned profile.
"""

from dataclasses import dataclass, field
from typing import Optional

from .timeseries import TimeSeries


@dataclass
class FlightProfile:
    """
    Velocity (m/s) and altitude (m) histories of a flight.

    Attributes:
        time_step: Sample spacing used by the simulations (s)
        velocity: Speed samples
        altitude: Altitude samples
        ballistic_range: Optional downrange bound of the mission (m)
    """
    time_step: float
    velocity: TimeSeries = field(default_factory=TimeSeries)
    altitude: TimeSeries = field(default_factory=TimeSeries)
    ballistic_range: Optional[float] = None

    def __post_init__(self):
        if self.time_step <= 0:
            raise ValueError(f"Time step must be positive, got {self.time_step}")

    def put_velocity(self, time: float, velocity: float) -> None:
        self.velocity.put(time, velocity)

    def put_altitude(self, time: float, altitude: float) -> None:
        self.altitude.put(time, altitude)

    def get_velocity(self, time: float) -> Optional[float]:
        return self.velocity.get(time)

    def get_altitude(self, time: float) -> Optional[float]:
        return self.altitude.get(time)

    def set_ballistic_range(self, ballistic_range: float) -> None:
        self.ballistic_range = ballistic_range

    @property
    def max_time(self) -> Optional[float]:
        """Latest time with any sample, or None for an empty profile."""
        ends = [s.last_time for s in (self.velocity, self.altitude) if len(s)]
        return max(ends) if ends else None

    def is_empty(self) -> bool:
        return len(self.velocity) == 0 and len(self.altitude) == 0

    def copy(self) -> 'FlightProfile':
        """Create a deep copy of the profile."""
        return FlightProfile(
            time_step=self.time_step,
            velocity=self.velocity.copy(),
            altitude=self.altitude.copy(),
            ballistic_range=self.ballistic_range,
        )

    def __str__(self) -> str:
        return (f"FlightProfile(dt={self.time_step}s, "
                f"velocity={len(self.velocity)} samples, "
                f"altitude={len(self.altitude)} samples)")


@dataclass
class VelocityProfile:
    """
    Horizontal (vx) and vertical (vy) velocity extracted by the replay.

    Attributes:
        flight: Conditioned profile the decomposition was derived from
        vx: Horizontal velocity samples (m/s)
        vy: Vertical velocity samples (m/s)
    """
    flight: FlightProfile
    vx: TimeSeries = field(default_factory=TimeSeries)
    vy: TimeSeries = field(default_factory=TimeSeries)

    @property
    def time_step(self) -> float:
        return self.flight.time_step

    def put_vx(self, time: float, vx: float) -> None:
        self.vx.put(time, vx)

    def put_vy(self, time: float, vy: float) -> None:
        self.vy.put(time, vy)

    def get_vx(self, time: float) -> Optional[float]:
        return self.vx.get(time)

    def get_vy(self, time: float) -> Optional[float]:
        return self.vy.get(time)

    def get_velocity(self, time: float) -> Optional[float]:
        return self.flight.get_velocity(time)

    def get_altitude(self, time: float) -> Optional[float]:
        return self.flight.get_altitude(time)
