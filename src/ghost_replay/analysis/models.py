"""Lap data models shared by detection, resampling and ideal-lap synthesis."""

from __future__ import annotations

from dataclasses import dataclass, field

from ghost_replay.telemetry.models import TelemetryFrame

IDEAL_LAP_INDEX = -1
"""Reserved :attr:`Lap.index` of the synthetic ideal lap."""


@dataclass(frozen=True)
class Lap:
    """A contiguous run of frames between two start/finish crossings.

    Laps are derived views: they are rebuilt in full whenever the source frame
    sequence changes and never edited in place.
    """

    index: int
    """1-based lap number, or :data:`IDEAL_LAP_INDEX` for the ideal lap."""

    frames: tuple[TelemetryFrame, ...]

    total_distance: float
    """Path length in metres."""

    lap_time: float
    """Elapsed lap time in seconds."""

    is_complete: bool
    """False only for a trailing partial lap at the end of the recording."""

    @property
    def is_ideal(self) -> bool:
        return self.index == IDEAL_LAP_INDEX

    @property
    def start_time(self) -> float:
        """Recording time of the first frame (0.0 for an empty lap)."""
        return self.frames[0].time if self.frames else 0.0

    @property
    def end_time(self) -> float:
        """Recording time of the last frame (0.0 for an empty lap)."""
        return self.frames[-1].time if self.frames else 0.0


@dataclass(frozen=True)
class IdealLapResult:
    """The ideal lap plus the source lap chosen for every micro-sector."""

    lap: Lap
    sector_sources: tuple[int, ...] = field(default=())
    """1-based index of the source lap that won each micro-sector, in order."""

    sector_times: tuple[float, ...] = field(default=())
    """Best elapsed time of each micro-sector in seconds."""
