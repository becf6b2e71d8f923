"""Lap detection from raw GPS telemetry.

The recordings carry no lap marker, so the start/finish location is searched
for: every few seconds of the opening part of the recording is tried as a
candidate line, and the candidate producing the most complete laps wins.

Candidates are scored on crossing indices alone; :class:`Lap` objects are
only built for the winner.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Sequence

from ghost_replay.analysis.models import Lap
from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.track.geometry import EARTH_RADIUS_M, distance_m, path_length_m

_logger = logging.getLogger(__name__)


def _score(crossings: list[int]) -> tuple[int, int]:
    """Ranking key: complete laps first, then total laps (complete + partial).

    Every accepted crossing opens a lap; all but the last are closed by the
    next crossing, the last one runs to the end of the recording.
    """
    return max(len(crossings) - 1, 0), len(crossings)


class _ProximityIndex:
    """Frames bucketed on a lat/lon grid for fixed-radius lookups.

    Cells are twice the search radius in both directions, so every frame
    within the radius of a point lies in the 3x3 block around its cell.
    """

    def __init__(self, frames: Sequence[TelemetryFrame], radius_m: float) -> None:
        self._frames = frames
        self._radius_m = radius_m
        max_abs_lat = max((abs(f.latitude) for f in frames), default=0.0)
        self._cell_lat = math.degrees(2 * radius_m / EARTH_RADIUS_M)
        self._cell_lon = self._cell_lat / max(math.cos(math.radians(max_abs_lat)), 1e-6)
        self._cells: dict[tuple[int, int], list[int]] = defaultdict(list)
        for i, f in enumerate(frames):
            self._cells[self._key(f.latitude, f.longitude)].append(i)

    def _key(self, lat: float, lon: float) -> tuple[int, int]:
        return math.floor(lat / self._cell_lat), math.floor(lon / self._cell_lon)

    def near(self, lat: float, lon: float) -> list[tuple[int, float]]:
        """``(index, distance)`` of every frame closer than the radius, in frame order."""
        row, col = self._key(lat, lon)
        indices: list[int] = []
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                indices.extend(self._cells.get((row + dr, col + dc), ()))
        indices.sort()

        result = []
        for i in indices:
            f = self._frames[i]
            d = distance_m(f.latitude, f.longitude, lat, lon)
            if d < self._radius_m:
                result.append((i, d))
        return result


class LapDetector:
    """Split a recording into laps by repeated proximity to a start/finish point.

    Args:
        proximity_m: A crossing only counts when the car passes within this
            distance of the candidate point.
        min_lap_time_s: Minimum time between two lap starts; suppresses double
            triggers from GPS jitter near the line.
        search_limit: Candidates are drawn from the first ``search_limit``
            frames only (~3 minutes at 60 Hz).
        candidate_step: Frames between two candidates (~5 s at 60 Hz).
        min_frames: Recordings shorter than this yield no laps.
    """

    def __init__(
        self,
        proximity_m: float = 20.0,
        min_lap_time_s: float = 30.0,
        search_limit: int = 10_000,
        candidate_step: int = 300,
        min_frames: int = 100,
    ) -> None:
        if candidate_step < 1:
            raise ValueError("candidate_step must be >= 1")
        self.proximity_m = proximity_m
        self.min_lap_time_s = min_lap_time_s
        self.search_limit = search_limit
        self.candidate_step = candidate_step
        self.min_frames = min_frames

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(self, frames: Sequence[TelemetryFrame]) -> list[Lap]:
        """Return complete laps in order, followed by at most one partial lap.

        Returns an empty list when fewer than ``min_frames`` frames are given
        or when no candidate produces a single crossing.
        """
        if len(frames) < self.min_frames:
            _logger.debug(
                "Lap detection skipped: %d frames (< %d)", len(frames), self.min_frames
            )
            return []

        index = _ProximityIndex(frames, self.proximity_m)
        best: list[int] = []
        best_candidate = -1
        limit = min(len(frames), self.search_limit)
        for i in range(0, limit, self.candidate_step):
            crossings = self._crossings(frames, index, frames[i].latitude, frames[i].longitude)
            if _score(crossings) > _score(best):
                best = crossings
                best_candidate = i

        complete, total = _score(best)
        _logger.debug(
            "Start/finish candidate at frame %d: %d complete / %d total laps",
            best_candidate,
            complete,
            total,
        )
        return self._build_laps(frames, best)

    def laps_for_start(
        self,
        frames: Sequence[TelemetryFrame],
        start_lat: float,
        start_lon: float,
    ) -> list[Lap]:
        """Split *frames* into laps using a fixed start/finish point."""
        if not frames:
            return []
        index = _ProximityIndex(frames, self.proximity_m)
        return self._build_laps(frames, self._crossings(frames, index, start_lat, start_lon))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _crossings(
        self,
        frames: Sequence[TelemetryFrame],
        index: _ProximityIndex,
        start_lat: float,
        start_lon: float,
    ) -> list[int]:
        """Frame indices at which a new lap starts.

        A crossing is the frame right after a local distance minimum inside
        the proximity radius, at least ``min_lap_time_s`` after the previous
        lap start.
        """
        accepted: list[int] = []
        lap_start_time = frames[0].time
        prev_i, prev_d = -2, math.inf

        for i, d in index.near(start_lat, start_lon):
            last_d = prev_d if prev_i == i - 1 else math.inf
            if last_d < self.proximity_m and d > last_d:
                if frames[i].time - lap_start_time > self.min_lap_time_s:
                    accepted.append(i)
                    lap_start_time = frames[i - 1].time
            prev_i, prev_d = i, d

        return accepted

    def _build_laps(self, frames: Sequence[TelemetryFrame], crossings: list[int]) -> list[Lap]:
        """Laps between consecutive crossings plus the trailing partial lap.

        Lap time runs from the frame before the opening crossing.
        """
        laps: list[Lap] = []
        for n, start in enumerate(crossings):
            is_complete = n + 1 < len(crossings)
            end = crossings[n + 1] if is_complete else len(frames)
            end_time = frames[end].time if is_complete else frames[-1].time
            laps.append(
                self._make_lap(
                    n + 1, frames[start:end], end_time - frames[start - 1].time, is_complete
                )
            )
        return laps

    @staticmethod
    def _make_lap(
        index: int, frames: Sequence[TelemetryFrame], lap_time: float, is_complete: bool
    ) -> Lap:
        return Lap(
            index=index,
            frames=tuple(frames),
            total_distance=path_length_m(frames),
            lap_time=lap_time,
            is_complete=is_complete,
        )
