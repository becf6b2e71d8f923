"""Shared fixtures: synthetic GPS recordings on a circular test track."""

from __future__ import annotations

import math

import pytest

from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.track.geometry import EARTH_RADIUS_M

CENTER_LAT = 45.0
CENTER_LON = 7.0


def circle_point(angle: float, radius_m: float) -> tuple[float, float]:
    """Lat/lon of the point at *angle* radians on a circle around the centre."""
    d_lat = radius_m * math.cos(angle) / EARTH_RADIUS_M
    d_lon = radius_m * math.sin(angle) / (EARTH_RADIUS_M * math.cos(math.radians(CENTER_LAT)))
    return CENTER_LAT + math.degrees(d_lat), CENTER_LON + math.degrees(d_lon)


def make_circuit(
    laps: int = 4,
    period_s: float = 40.0,
    hz: int = 10,
    radius_m: float = 300.0,
) -> list[TelemetryFrame]:
    """Frames of a car driving *laps* times around a circle at constant speed.

    Frame 0 sits on the circle at angle 0; the recording ends exactly where it
    started.
    """
    samples_per_lap = int(period_s * hz)
    speed_kmh = 2 * math.pi * radius_m / period_s * 3.6
    frames = []
    for i in range(laps * samples_per_lap + 1):
        lat, lon = circle_point(2 * math.pi * i / samples_per_lap, radius_m)
        frames.append(
            TelemetryFrame(
                time=i / hz,
                latitude=lat,
                longitude=lon,
                speed=speed_kmh,
                throttle=80.0,
                gear=4,
            )
        )
    return frames


@pytest.fixture
def circuit_frames() -> list[TelemetryFrame]:
    """Four 40 s laps around a 300 m radius circle at 10 Hz (1601 frames)."""
    return make_circuit()


@pytest.fixture
def circuit_factory():
    """Return :func:`make_circuit` for tests that need other lap counts or speeds."""
    return make_circuit
