"""Replay timeline: playback clock and session state."""

from ghost_replay.playback.clock import PlaybackClock, PlaybackState
from ghost_replay.playback.session import LapSummary, ReplaySession

__all__ = ["LapSummary", "PlaybackClock", "PlaybackState", "ReplaySession"]
