"""Telemetry data models."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass

# Channels that must never be linearly interpolated.
DISCRETE_CHANNELS: frozenset[str] = frozenset({"gear"})


@dataclass(frozen=True)
class TelemetryFrame:
    """A single timestamped sample from the data logger.

    Frames are immutable: derived frames (resampled, time-shifted) are built
    with :func:`dataclasses.replace`.  Units follow the logger's CSV export.
    """

    time: float
    """Seconds elapsed since the start of the recording."""

    latitude: float
    """Signed decimal degrees (negative = south)."""

    longitude: float
    """Signed decimal degrees (negative = west)."""

    speed: float = 0.0
    """Vehicle speed in km/h."""

    rpm: float = 0.0
    throttle: float = 0.0
    """Throttle position in percent [0, 100]."""

    brake: float = 0.0
    """Brake pedal position in percent [0, 100]."""

    gear: int = 0
    steering: float = 0.0
    """Steering angle in degrees."""

    g_force_lat: float = 0.0
    g_force_lon: float = 0.0
    battery_voltage: float = 0.0
    coolant_temp: float = 0.0
    oil_pressure: float = 0.0
    oil_temp: float = 0.0
    altitude: float = 0.0
    """Height above sea level in metres."""

    gradient: float = 0.0
    fuel_level: float = 0.0
    brake_pressure: float = 0.0
    """Brake line pressure in bar."""

    exhaust_temp: float = 0.0
    combo_g: float = 0.0
    vertical_velocity: float = 0.0
    radius_of_turn: float = 0.0

    def is_valid(self) -> bool:
        """Return True if time and position are finite (no NaN/Inf)."""
        return all(math.isfinite(v) for v in (self.time, self.latitude, self.longitude))


def continuous_channels() -> tuple[str, ...]:
    """Return the names of every :class:`TelemetryFrame` field that is interpolated."""
    return tuple(
        f.name for f in dataclasses.fields(TelemetryFrame) if f.name not in DISCRETE_CHANNELS
    )
