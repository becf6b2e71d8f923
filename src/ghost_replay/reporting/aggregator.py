"""Session debrief aggregation."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ghost_replay.analysis.models import IdealLapResult, Lap
from ghost_replay.reporting.models import LapLine, SessionReport


class SessionReportAggregator:
    """Combine detected laps and the ideal lap into a :class:`SessionReport`.

    Partial laps are counted but not listed; a missing ideal lap leaves the
    gap fields as ``None``.
    """

    def aggregate(
        self,
        laps: Sequence[Lap],
        ideal: IdealLapResult | None,
        source: str = "",
    ) -> SessionReport:
        complete = [lap for lap in laps if lap.is_complete]
        ideal_time = ideal.lap.lap_time if ideal else None
        wins = Counter(ideal.sector_sources) if ideal else Counter()

        best = min(complete, key=lambda lap: lap.lap_time) if complete else None

        lines = [
            LapLine(
                lap_index=lap.index,
                lap_time=lap.lap_time,
                total_distance=lap.total_distance,
                gap_to_ideal_s=(lap.lap_time - ideal_time) if ideal_time is not None else None,
                sectors_won=wins.get(lap.index, 0),
                is_best=best is not None and lap.index == best.index,
            )
            for lap in complete
        ]

        gain = None
        if best is not None and ideal_time is not None:
            gain = best.lap_time - ideal_time

        return SessionReport(
            source=source,
            lap_count=len(laps),
            complete_lap_count=len(complete),
            best_lap_index=best.index if best else None,
            best_lap_time=best.lap_time if best else None,
            ideal_lap_time=ideal_time,
            theoretical_gain_s=gain,
            laps=lines,
        )
