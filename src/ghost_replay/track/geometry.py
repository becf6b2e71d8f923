"""Geodesic distance helpers for GPS telemetry."""

from __future__ import annotations

import math
from collections.abc import Sequence

from ghost_replay.telemetry.models import TelemetryFrame

EARTH_RADIUS_M = 6_371_000.0


def distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres between two lat/lon points (Haversine).

    Identical points yield exactly 0.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def frame_distance_m(a: TelemetryFrame, b: TelemetryFrame) -> float:
    return distance_m(a.latitude, a.longitude, b.latitude, b.longitude)


def cumulative_distances_m(frames: Sequence[TelemetryFrame]) -> list[float]:
    """Running path length at each frame, starting at 0 for the first frame."""
    if not frames:
        return []
    result = [0.0]
    total = 0.0
    for prev, cur in zip(frames, frames[1:]):
        total += frame_distance_m(prev, cur)
        result.append(total)
    return result


def path_length_m(frames: Sequence[TelemetryFrame]) -> float:
    """Total point-to-point distance along *frames* in metres."""
    return sum(frame_distance_m(a, b) for a, b in zip(frames, frames[1:]))
