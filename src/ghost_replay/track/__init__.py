"""Track geometry helpers."""

from ghost_replay.track.geometry import (
    EARTH_RADIUS_M,
    cumulative_distances_m,
    distance_m,
    path_length_m,
)

__all__ = ["EARTH_RADIUS_M", "cumulative_distances_m", "distance_m", "path_length_m"]
