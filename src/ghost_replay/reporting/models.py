"""Session debrief data models."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field


@dataclass
class Suggestion:
    """A single improvement suggestion.

    Args:
        lap_index: Lap the suggestion refers to (0 = whole session).
        severity: ``'high'``, ``'medium'``, or ``'low'``.
        suggestion: Human-readable actionable advice.
    """

    lap_index: int
    severity: str
    suggestion: str


@dataclass
class LapLine:
    """One complete lap as it appears in the debrief."""

    lap_index: int
    lap_time: float
    total_distance: float

    gap_to_ideal_s: float | None
    """``lap_time - ideal_lap_time``; ``None`` when there is no ideal lap."""

    sectors_won: int = 0
    """Number of micro-sectors of the ideal lap taken from this lap."""

    is_best: bool = False


@dataclass
class SessionReport:
    """Debrief for one recording.

    ``laps`` is in driving order.  ``summary`` and ``top_improvements`` are
    populated by the LLM client (or its rule-based fallback).
    """

    source: str
    lap_count: int
    complete_lap_count: int
    best_lap_index: int | None
    best_lap_time: float | None
    ideal_lap_time: float | None

    theoretical_gain_s: float | None
    """Best lap minus ideal lap, seconds."""

    laps: list[LapLine]
    top_improvements: list[Suggestion] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> dict:
        """Return a JSON-serializable dict (recursive via :func:`dataclasses.asdict`)."""
        return dataclasses.asdict(self)
