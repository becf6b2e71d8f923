"""Live coaching from driver-vs-ghost comparisons."""

from ghost_replay.coaching.coach import (
    CoachMessage,
    PerformanceCoach,
    feedback_phrases,
    status_text,
)
from ghost_replay.coaching.performance import PerformanceSnapshot, compare_frames

__all__ = [
    "CoachMessage",
    "PerformanceCoach",
    "PerformanceSnapshot",
    "compare_frames",
    "feedback_phrases",
    "status_text",
]
