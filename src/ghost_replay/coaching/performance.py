"""Instantaneous comparison of the driver's frame against the ghost frame."""

from __future__ import annotations

from dataclasses import dataclass

from ghost_replay.telemetry.models import TelemetryFrame

SPEED_MATCH_KMH = 5.0
G_MATCH = 0.2


@dataclass
class PerformanceSnapshot:
    """Driver vs ghost at one playback instant."""

    speed_delta: float
    """Driver speed minus ghost speed, km/h.  Positive = driver is faster."""

    is_good_line: bool
    """Lateral and longitudinal g both within 0.2 g of the ghost."""

    is_good_speed: bool
    """Speed within 5 km/h of the ghost."""

    is_faster: bool
    """Driver more than 5 km/h faster than the ghost."""

    @property
    def label(self) -> str:
        if self.is_faster:
            return "GAINING"
        if self.is_good_line:
            return "MATCHING"
        return "LOSING"


def compare_frames(current: TelemetryFrame, ghost: TelemetryFrame) -> PerformanceSnapshot:
    speed_delta = current.speed - ghost.speed
    g_lat_match = abs(current.g_force_lat - ghost.g_force_lat) < G_MATCH
    g_lon_match = abs(current.g_force_lon - ghost.g_force_lon) < G_MATCH
    return PerformanceSnapshot(
        speed_delta=speed_delta,
        is_good_line=g_lat_match and g_lon_match,
        is_good_speed=abs(speed_delta) < SPEED_MATCH_KMH,
        is_faster=speed_delta > SPEED_MATCH_KMH,
    )
