"""Arc-length resampling of laps onto a uniform distance grid."""

from __future__ import annotations

import bisect
import dataclasses

from ghost_replay.analysis.models import Lap
from ghost_replay.telemetry.models import TelemetryFrame, continuous_channels
from ghost_replay.track.geometry import cumulative_distances_m

_CHANNELS = continuous_channels()


def _lerp_frame(f1: TelemetryFrame, f2: TelemetryFrame, ratio: float) -> TelemetryFrame:
    """Blend two frames; discrete channels (gear) keep the earlier frame's value."""
    values = {
        name: getattr(f1, name) + (getattr(f2, name) - getattr(f1, name)) * ratio
        for name in _CHANNELS
    }
    return dataclasses.replace(f1, **values)


class LapResampler:
    """Re-express a lap at fixed distance intervals instead of fixed time intervals.

    Args:
        step_m: Spacing of the output grid in metres.
    """

    def __init__(self, step_m: float = 5.0) -> None:
        if step_m <= 0:
            raise ValueError("step_m must be > 0")
        self.step_m = step_m

    def resample(self, lap: Lap) -> Lap:
        """Return a copy of *lap* sampled at ``0, step, 2*step, … <= total_distance``.

        Laps with fewer than two frames are returned unchanged.  Lap index,
        time, completeness and ``total_distance`` are preserved.
        """
        frames = lap.frames
        if len(frames) < 2:
            return lap

        cum = cumulative_distances_m(frames)
        last = len(cum) - 1
        out: list[TelemetryFrame] = []

        k = 0
        while k * self.step_m <= lap.total_distance:
            d = k * self.step_m
            idx = bisect.bisect_left(cum, d)
            if idx > last:
                idx = last
            if idx == 0:
                idx = 1
            d1, d2 = cum[idx - 1], cum[idx]
            span = d2 - d1
            ratio = (d - d1) / (span if span else 1.0)
            out.append(_lerp_frame(frames[idx - 1], frames[idx], ratio))
            k += 1

        return dataclasses.replace(lap, frames=tuple(out))
