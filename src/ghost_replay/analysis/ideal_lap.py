"""Ideal lap synthesis — best micro-sector of every complete lap, stitched together.

The result is a theoretical lower bound rather than a drivable lap: adjacent
sectors may come from different laps, so position and vehicle state can jump
at sector boundaries.  Only time is made continuous.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

from ghost_replay.analysis.models import IDEAL_LAP_INDEX, IdealLapResult, Lap
from ghost_replay.analysis.resample import LapResampler
from ghost_replay.telemetry.models import TelemetryFrame

_logger = logging.getLogger(__name__)


class IdealLapSynthesizer:
    """Build the ideal lap from a session's complete laps.

    Args:
        micro_sector_m: Length of each micro-sector in metres.
        step_m: Resampling resolution in metres.
    """

    def __init__(self, micro_sector_m: float = 50.0, step_m: float = 5.0) -> None:
        if micro_sector_m <= 0:
            raise ValueError("micro_sector_m must be > 0")
        self.micro_sector_m = micro_sector_m
        self.step_m = step_m
        self._resampler = LapResampler(step_m)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def synthesize(self, laps: Sequence[Lap]) -> Lap | None:
        """Return the ideal lap, or ``None`` with fewer than two complete laps."""
        result = self.synthesize_detailed(laps)
        return result.lap if result else None

    def synthesize_detailed(self, laps: Sequence[Lap]) -> IdealLapResult | None:
        """Like :meth:`synthesize` but also report which lap won each sector."""
        complete = [lap for lap in laps if lap.is_complete]
        if len(complete) < 2:
            return None

        resampled = [self._resampler.resample(lap) for lap in complete]

        # Truncate to the shortest lap so sector boundaries line up.
        min_len = min(len(lap.frames) for lap in resampled)
        resampled = [dataclasses.replace(lap, frames=lap.frames[:min_len]) for lap in resampled]
        per_sector = max(1, int(self.micro_sector_m // self.step_m))
        n_sectors = min_len // per_sector

        frames: list[TelemetryFrame] = []
        sources: list[int] = []
        sector_times: list[float] = []
        running = 0.0

        for s in range(n_sectors):
            start = s * per_sector
            end = start + per_sector

            best_lap, best_time = self._best_for_sector(resampled, start, end)

            sector = best_lap.frames[start:min(end, len(best_lap.frames))]
            t0 = sector[0].time
            for frame in sector:
                frames.append(dataclasses.replace(frame, time=running + (frame.time - t0)))

            running += best_time
            sources.append(best_lap.index)
            sector_times.append(best_time)

        ideal = Lap(
            index=IDEAL_LAP_INDEX,
            frames=tuple(frames),
            total_distance=len(frames) * self.step_m,
            lap_time=running,
            is_complete=True,
        )
        _logger.info(
            "Ideal lap: %.3fs over %d micro-sectors from %d laps",
            running,
            n_sectors,
            len(complete),
        )
        return IdealLapResult(lap=ideal, sector_sources=tuple(sources), sector_times=tuple(sector_times))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _best_for_sector(laps: list[Lap], start: int, end: int) -> tuple[Lap, float]:
        """Return the lap with the shortest elapsed time over ``[start, end]``.

        Ties go to the earlier lap.
        """
        best_lap = laps[0]
        best_time = float("inf")
        for lap in laps:
            f = lap.frames
            dt = f[min(end, len(f) - 1)].time - f[start].time
            if dt < best_time:
                best_time = dt
                best_lap = lap
        return best_lap, best_time
