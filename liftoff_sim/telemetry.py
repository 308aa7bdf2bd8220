"""
Liftoff Flight Replay - Telemetry Ingestion

Reads line-oriented JSON telemetry records of the form

    {"time": 12.0, "velocity": 310.5, "altitude": 2.4}

with time in seconds, velocity in m/s and altitude in km. Altitude is
converted to metres on ingestion.
"""

import json
import logging
import os
from typing import Union

from .flight_profile import FlightProfile
from .utils import km_to_m

logger = logging.getLogger(__name__)

_FIELDS = ('time', 'velocity', 'altitude')


class TelemetryFormatError(Exception):
    """Raised when a telemetry record cannot be parsed."""
    pass


def parse_telemetry(profile: FlightProfile, path: Union[str, os.PathLike]) -> int:
    """
    Parse a JSON-lines telemetry file into the given profile.

    A missing or unreadable file is reported and leaves the profile empty.

    Args:
        profile: Profile receiving velocity and altitude samples
        path: Path to the telemetry file

    Returns:
        Number of records ingested

    Raises:
        TelemetryFormatError: If a non-blank line is not a valid record
    """
    if not os.path.isfile(path):
        logger.warning(f"Cannot find telemetry file '{path}'")
        return 0

    try:
        with open(path, 'rb') as fh:
            raw_lines = fh.readlines()
    except OSError as e:
        logger.warning(f"Cannot read telemetry file '{path}': {e}")
        return 0

    count = 0
    for line_no, raw in enumerate(raw_lines, start=1):
        try:
            line = raw.decode('utf-8').strip()
            if not line:
                continue
            record = json.loads(line)
            time, velocity, altitude = (float(record[k]) for k in _FIELDS)
            profile.put_velocity(time, velocity)
            profile.put_altitude(time, km_to_m(altitude))
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise TelemetryFormatError(
                f"{path}:{line_no}: invalid telemetry record: {e}") from e
        count += 1

    logger.info(f"Ingested {count} telemetry records from '{path}'")
    return count


def write_telemetry(profile: FlightProfile, path: Union[str, os.PathLike]) -> None:
    """Write a profile back out as JSON-lines telemetry (altitude in km)."""
    os.makedirs(os.path.dirname(os.fspath(path)) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as fh:
        for t, v in profile.velocity:
            alt = profile.get_altitude(t)
            if alt is None:
                continue
            fh.write(json.dumps({'time': t, 'velocity': v, 'altitude': alt / 1000.0}) + '\n')
