"""Ghost lookup — the ideal-lap frame matching the current playback position.

Correspondence is by lap-relative elapsed time: the ghost shows where the
ideal lap would be after the same number of seconds into the lap.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence

from ghost_replay.analysis.models import Lap
from ghost_replay.telemetry.models import TelemetryFrame


def _containing_lap(laps: Sequence[Lap], t: float) -> Lap | None:
    for lap in laps:
        if lap.start_time <= t <= lap.end_time:
            return lap
    return None


def ghost_time(t: float, ideal_lap_time: float, laps: Sequence[Lap]) -> float | None:
    """Ideal-lap time matching recording time *t*, or ``None`` if there is none.

    * Inside a lap: time since that lap started.
    * After the last lap ends: still measured against the last lap.
    * Before the first lap (out lap): if the first crossing is closer than
      one ideal lap away, the ghost is shown finishing its previous circuit.
    * Between laps, or further ahead of the first crossing: ``None``.

    *laps* must not contain empty laps.
    """
    if not laps:
        return None

    lap = _containing_lap(laps, t)
    if lap is None and t > laps[-1].end_time:
        lap = laps[-1]
    if lap is not None:
        return t - lap.start_time

    gap = laps[0].start_time - t
    if 0 < gap < ideal_lap_time:
        return ideal_lap_time - gap
    return None


def frame_at_time(lap: Lap, t: float) -> TelemetryFrame | None:
    """Latest frame of *lap* whose ``time`` does not exceed *t*.

    No interpolation is done.  Times before the first frame map to the first
    frame.
    """
    if not lap.frames:
        return None
    times = [f.time for f in lap.frames]
    idx = bisect.bisect_right(times, t) - 1
    return lap.frames[max(idx, 0)]


def find_ghost_frame(
    current: TelemetryFrame | None,
    ideal_lap: Lap | None,
    laps: Sequence[Lap],
) -> TelemetryFrame | None:
    """Return the ideal-lap frame for *current*, or ``None`` if there is none.

    See :func:`ghost_time` for how the lap-relative time is chosen.
    """
    if current is None or ideal_lap is None or not ideal_lap.frames:
        return None
    rel = ghost_time(current.time, ideal_lap.lap_time, [lap for lap in laps if lap.frames])
    return None if rel is None else frame_at_time(ideal_lap, rel)


class GhostMatcher:
    """Binds a lap list and ideal lap for repeated ghost lookups.

    Rebuild the matcher whenever laps are recomputed; it caches the ideal
    lap's time index.
    """

    def __init__(self, laps: Sequence[Lap], ideal_lap: Lap | None) -> None:
        self._laps = [lap for lap in laps if lap.frames]
        self._ideal = ideal_lap
        self._times = [f.time for f in ideal_lap.frames] if ideal_lap else []

    @property
    def ideal_lap(self) -> Lap | None:
        return self._ideal

    def match(self, current: TelemetryFrame | None) -> TelemetryFrame | None:
        """Same result as :func:`find_ghost_frame`, using the cached time index."""
        if current is None or self._ideal is None or not self._times:
            return None
        rel = ghost_time(current.time, self._ideal.lap_time, self._laps)
        if rel is None:
            return None
        idx = bisect.bisect_right(self._times, rel) - 1
        return self._ideal.frames[max(idx, 0)]
