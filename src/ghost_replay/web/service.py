"""ReplayService — the single replay session behind the Web API."""

from __future__ import annotations

import dataclasses
import os

from ghost_replay.analysis.ideal_lap import IdealLapSynthesizer
from ghost_replay.coaching.coach import PerformanceCoach, status_text
from ghost_replay.coaching.performance import compare_frames
from ghost_replay.config import Settings
from ghost_replay.playback.session import ReplaySession
from ghost_replay.reporting.aggregator import SessionReportAggregator
from ghost_replay.reporting.llm_client import DebriefClient
from ghost_replay.reporting.models import SessionReport
from ghost_replay.telemetry.manifest import RecordingEntry, build_manifest
from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.web.schemas import FrameModel, PlaybackResponse


def frame_model(frame: TelemetryFrame | None) -> FrameModel | None:
    if frame is None:
        return None
    return FrameModel(**dataclasses.asdict(frame))


class ReplayService:
    """Owns the active :class:`ReplaySession`, its coach and its debrief.

    Parameters
    ----------
    settings:
        Data directory and analysis parameters.
    session:
        Injected for testing; built from *settings* otherwise.
    llm_client:
        Optional LLM client for testing injection.  If None a default
        :class:`DebriefClient` is created on first use.
    coach:
        Injected for testing.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session: ReplaySession | None = None,
        llm_client: DebriefClient | None = None,
        coach: PerformanceCoach | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.session = session or ReplaySession(
            synthesizer=IdealLapSynthesizer(
                micro_sector_m=self.settings.micro_sector_m,
                step_m=self.settings.resample_step_m,
            )
        )
        self.coach = coach or PerformanceCoach()
        self._llm = llm_client

    # ------------------------------------------------------------------
    # Recordings
    # ------------------------------------------------------------------

    def recordings(self) -> list[RecordingEntry]:
        return build_manifest(self.settings.data_dir)

    def resolve(self, path: str) -> str:
        """Return *path* as given if it exists, else relative to the data directory."""
        if os.path.isabs(path) or os.path.exists(path):
            return path
        return os.path.join(self.settings.data_dir, path)

    def load(self, path: str) -> None:
        """Load a recording.

        Raises
        ------
        RecordingReadError
            If the file is missing or cannot be decoded.
        """
        self.session.load_file(self.resolve(path))
        self.coach.reset()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def playback_state(self) -> PlaybackResponse:
        state = self.session.clock.state
        return PlaybackResponse(
            index=state.index,
            playback_time=state.playback_time,
            is_playing=state.is_playing,
            speed=state.speed,
            is_looping=state.is_looping,
            frame_count=len(self.session.frames),
            current_frame=frame_model(self.session.current_frame),
            ghost_frame=frame_model(self.session.ghost_frame()),
        )

    # ------------------------------------------------------------------
    # Coaching / debrief
    # ------------------------------------------------------------------

    def coach_update(self) -> tuple[str, float | None]:
        """Feed the current instant to the coach; return ``(status, speed_delta)``."""
        current = self.session.current_frame
        ghost = self.session.ghost_frame()
        self.coach.update(current, ghost, self.session.clock.index)
        if current is None or ghost is None:
            return status_text(current, self.session.laps), None
        snapshot = compare_frames(current, ghost)
        return snapshot.label, snapshot.speed_delta

    def report(self) -> SessionReport:
        report = SessionReportAggregator().aggregate(
            self.session.laps, self.session.ideal, source=self.session.source or ""
        )
        llm = self._llm if self._llm is not None else DebriefClient()
        return llm.analyze(report)
