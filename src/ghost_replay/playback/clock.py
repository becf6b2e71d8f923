"""PlaybackClock — advances the replay position from wall-clock ticks.

Driven cooperatively: the renderer calls :meth:`PlaybackClock.tick` once per
animation frame with a millisecond timestamp.  The clock is the only writer
of :class:`PlaybackState`; observers are told about index changes through a
single callback and never see redundant notifications.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ghost_replay.telemetry.models import TelemetryFrame


@dataclass
class PlaybackState:
    """Mutable replay position.  Owned by one :class:`PlaybackClock`."""

    index: int = 0
    playback_time: float = 0.0
    """Accumulated replay time in recording seconds."""

    is_playing: bool = False
    speed: float = 1.0
    is_looping: bool = False


class PlaybackClock:
    """Paused/Playing state machine over a frame sequence.

    Parameters
    ----------
    frames:
        The recording.  Only ``time`` is read.
    on_index_change:
        Called with the new index whenever it changes (tick, seek, loop wrap).
    """

    def __init__(
        self,
        frames: Sequence[TelemetryFrame],
        on_index_change: Callable[[int], None] | None = None,
    ) -> None:
        self._frames = frames
        self._on_index_change = on_index_change
        self._last_tick_ms: float | None = None
        self.state = PlaybackState()
        if frames:
            self.state.playback_time = frames[0].time

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def index(self) -> int:
        return self.state.index

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @property
    def current_frame(self) -> TelemetryFrame | None:
        if not self._frames:
            return None
        return self._frames[self.state.index]

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def play(self, now_ms: float) -> None:
        """Start (or keep) playing from the current frame."""
        if not self._frames:
            return
        self.state.is_playing = True
        self._last_tick_ms = now_ms
        self.state.playback_time = self._frames[self.state.index].time

    def pause(self) -> None:
        self.state.is_playing = False
        self._last_tick_ms = None

    def toggle(self, now_ms: float) -> None:
        if self.state.is_playing:
            self.pause()
        else:
            self.play(now_ms)

    def seek(self, index: int) -> None:
        """Jump to *index*, clamped to ``[0, len(frames) - 1]``.  Valid while playing."""
        if not self._frames:
            return
        index = min(max(int(index), 0), len(self._frames) - 1)
        self.state.playback_time = self._frames[index].time
        self._set_index(index)

    def step(self, offset: int) -> None:
        """Seek relative to the current index (e.g. ±100 frames)."""
        self.seek(self.state.index + offset)

    def set_speed(self, multiplier: float, now_ms: float) -> None:
        """Change the playback speed multiplier.

        The tick reference is reset so the next tick does not apply the new
        speed to time that elapsed under the old one.

        Raises:
            ValueError: If *multiplier* is not a positive finite number.
        """
        if not math.isfinite(multiplier) or multiplier <= 0:
            raise ValueError(f"speed multiplier must be > 0, got {multiplier!r}")
        self.state.speed = multiplier
        self._last_tick_ms = now_ms

    def set_looping(self, enabled: bool) -> None:
        self.state.is_looping = bool(enabled)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def tick(self, now_ms: float) -> bool:
        """Advance playback to wall-clock *now_ms*.

        Returns True if the current index changed.  Does nothing while paused.
        """
        if not self.state.is_playing or not self._frames:
            return False

        if self._last_tick_ms is None:
            self._last_tick_ms = now_ms
            return False

        delta_s = (now_ms - self._last_tick_ms) * self.state.speed / 1000
        self._last_tick_ms = now_ms
        self.state.playback_time += delta_s
        target = self.state.playback_time

        frames = self._frames
        last = len(frames) - 1
        index = self.state.index
        while index < last and frames[index + 1].time <= target:
            index += 1

        changed = self._set_index(index)

        if index >= last:
            if self.state.is_looping:
                self.state.playback_time = frames[0].time
                changed = self._set_index(0) or changed
            else:
                self.pause()

        return changed

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _set_index(self, index: int) -> bool:
        if index == self.state.index:
            return False
        self.state.index = index
        if self._on_index_change is not None:
            self._on_index_change(index)
        return True
