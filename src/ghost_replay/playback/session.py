"""ReplaySession — owns a recording and everything derived from it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ghost_replay.analysis.ghost import GhostMatcher
from ghost_replay.analysis.ideal_lap import IdealLapSynthesizer
from ghost_replay.analysis.lap_detector import LapDetector
from ghost_replay.analysis.models import IdealLapResult, Lap
from ghost_replay.playback.clock import PlaybackClock
from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.telemetry.reader import RecordingReader

_logger = logging.getLogger(__name__)


@dataclass
class LapSummary:
    """Display row for one lap."""

    index: int
    lap_time: float
    total_distance: float
    is_complete: bool


class ReplaySession:
    """One active timeline: frames, laps, ideal lap, playback clock.

    Loading new data resets every derived structure before recomputing, so a
    reader never sees laps or a ghost belonging to the previous recording.

    Parameters
    ----------
    detector / synthesizer / reader:
        Injected for testability; sensible defaults otherwise.
    on_index_change:
        Forwarded to every :class:`PlaybackClock` this session creates.
    """

    def __init__(
        self,
        detector: LapDetector | None = None,
        synthesizer: IdealLapSynthesizer | None = None,
        reader: RecordingReader | None = None,
        on_index_change: Callable[[int], None] | None = None,
    ) -> None:
        self._detector = detector or LapDetector()
        self._synthesizer = synthesizer or IdealLapSynthesizer()
        self._reader = reader or RecordingReader()
        self._on_index_change = on_index_change
        self.source: str | None = None
        self._reset()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, frames: Sequence[TelemetryFrame], source: str | None = None) -> None:
        """Replace the recording and recompute laps and the ideal lap.

        Position and play state start over; the speed multiplier and loop
        flag carry over to the new clock.
        """
        previous = self.clock.state
        self._reset()

        frames = tuple(frames)
        laps = self._detector.detect(frames)
        ideal = self._synthesizer.synthesize_detailed(laps)

        self.frames = frames
        self.laps = laps
        self.ideal = ideal
        self.clock = PlaybackClock(frames, self._on_index_change)
        self.clock.state.speed = previous.speed
        self.clock.state.is_looping = previous.is_looping
        self._matcher = GhostMatcher(laps, ideal.lap if ideal else None)
        self.source = source

        _logger.info(
            "Session loaded from %s: %d frames, %d laps (%d complete), ideal lap %s",
            source or "<memory>",
            len(frames),
            len(laps),
            sum(1 for lap in laps if lap.is_complete),
            f"{ideal.lap.lap_time:.3f}s" if ideal else "n/a",
        )

    def load_file(self, path: str) -> None:
        """Read a CSV recording and :meth:`load` it.

        Raises:
            RecordingReadError: If the file cannot be read.  The previous
                session data is kept in that case.
        """
        frames = self._reader.read(path)
        self.load(frames, source=path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def ideal_lap(self) -> Lap | None:
        return self.ideal.lap if self.ideal else None

    @property
    def current_frame(self) -> TelemetryFrame | None:
        return self.clock.current_frame

    def ghost_frame(self, frame: TelemetryFrame | None = None) -> TelemetryFrame | None:
        """Ideal-lap frame for *frame* (default: the current playback frame)."""
        return self._matcher.match(frame if frame is not None else self.current_frame)

    def lap_summaries(self) -> list[LapSummary]:
        return [
            LapSummary(
                index=lap.index,
                lap_time=lap.lap_time,
                total_distance=lap.total_distance,
                is_complete=lap.is_complete,
            )
            for lap in self.laps
        ]

    def history(self, window_s: float = 60.0) -> list[TelemetryFrame]:
        """Frames from the last *window_s* seconds up to the current frame."""
        current = self.current_frame
        if current is None:
            return []
        return [
            f for f in self.frames[: self.clock.index + 1] if f.time > current.time - window_s
        ]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self.frames: tuple[TelemetryFrame, ...] = ()
        self.laps: list[Lap] = []
        self.ideal: IdealLapResult | None = None
        self.clock = PlaybackClock((), self._on_index_change)
        self._matcher = GhostMatcher([], None)
        self.source = None
