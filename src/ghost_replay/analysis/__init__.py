"""Lap detection, resampling, ideal-lap synthesis and ghost lookup."""

from ghost_replay.analysis.ghost import (
    GhostMatcher,
    find_ghost_frame,
    frame_at_time,
    ghost_time,
)
from ghost_replay.analysis.ideal_lap import IdealLapSynthesizer
from ghost_replay.analysis.lap_detector import LapDetector
from ghost_replay.analysis.models import IDEAL_LAP_INDEX, IdealLapResult, Lap
from ghost_replay.analysis.resample import LapResampler

__all__ = [
    "IDEAL_LAP_INDEX",
    "GhostMatcher",
    "IdealLapResult",
    "IdealLapSynthesizer",
    "Lap",
    "LapDetector",
    "LapResampler",
    "find_ghost_frame",
    "frame_at_time",
    "ghost_time",
]
