"""FastAPI application — drives replay, ghost lookup and coaching for a renderer.

The renderer calls ``POST /api/playback/tick`` once per animation frame with
its own millisecond clock; everything else is request/response.
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query

from ghost_replay.config import Settings
from ghost_replay.telemetry.reader import RecordingNotFoundError, RecordingReadError
from ghost_replay.web.schemas import (
    CoachMessageModel,
    CoachResponse,
    HealthResponse,
    HistoryResponse,
    LapModel,
    LapsResponse,
    LoadRequest,
    LoadResponse,
    LoopRequest,
    NowRequest,
    PlaybackResponse,
    RecordingModel,
    RecordingsResponse,
    ReportResponse,
    SeekRequest,
    SpeedRequest,
    StepRequest,
)
from ghost_replay.web.service import ReplayService, frame_model

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Ghost Replay", version=VERSION)

_service: ReplayService | None = None


def get_service() -> ReplayService:
    """Return the process-wide replay service, creating it on first use."""
    global _service
    if _service is None:
        _service = ReplayService(Settings.from_env())
    return _service


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/recordings", response_model=RecordingsResponse)
def list_recordings(svc: ReplayService = Depends(get_service)) -> RecordingsResponse:
    """Recordings in the data directory, newest first."""
    try:
        entries = svc.recordings()
    except RecordingReadError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return RecordingsResponse(
        data_dir=svc.settings.data_dir,
        recordings=[
            RecordingModel(name=e.name, path=e.path, last_modified=e.last_modified, size=e.size)
            for e in entries
        ],
    )


@app.post("/api/session", response_model=LoadResponse)
def load_session(req: LoadRequest, svc: ReplayService = Depends(get_service)) -> LoadResponse:
    """Load a recording and recompute laps and the ideal lap."""
    try:
        svc.load(req.path)
    except RecordingNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except RecordingReadError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    session = svc.session
    ideal = session.ideal_lap
    return LoadResponse(
        source=session.source or req.path,
        frame_count=len(session.frames),
        lap_count=len(session.laps),
        complete_lap_count=sum(1 for lap in session.laps if lap.is_complete),
        ideal_lap_time=ideal.lap_time if ideal else None,
    )


@app.get("/api/laps", response_model=LapsResponse)
def list_laps(svc: ReplayService = Depends(get_service)) -> LapsResponse:
    session = svc.session
    ideal = session.ideal
    return LapsResponse(
        laps=[
            LapModel(
                index=s.index,
                lap_time=s.lap_time,
                total_distance=s.total_distance,
                is_complete=s.is_complete,
            )
            for s in session.lap_summaries()
        ],
        ideal_lap_time=ideal.lap.lap_time if ideal else None,
        sector_sources=list(ideal.sector_sources) if ideal else [],
    )


@app.get("/api/playback", response_model=PlaybackResponse)
def playback(svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    return svc.playback_state()


@app.get("/api/playback/history", response_model=HistoryResponse)
def playback_history(
    window_s: float = Query(60.0, gt=0),
    svc: ReplayService = Depends(get_service),
) -> HistoryResponse:
    """Recent frames for gauge and chart history."""
    return HistoryResponse(
        window_s=window_s,
        frames=[frame_model(f) for f in svc.session.history(window_s)],
    )


@app.post("/api/playback/play", response_model=PlaybackResponse)
def play(req: NowRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.play(req.now_ms)
    return svc.playback_state()


@app.post("/api/playback/pause", response_model=PlaybackResponse)
def pause(svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.pause()
    return svc.playback_state()


@app.post("/api/playback/toggle", response_model=PlaybackResponse)
def toggle(req: NowRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.toggle(req.now_ms)
    return svc.playback_state()


@app.post("/api/playback/seek", response_model=PlaybackResponse)
def seek(req: SeekRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.seek(req.index)
    return svc.playback_state()


@app.post("/api/playback/step", response_model=PlaybackResponse)
def step(req: StepRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.step(req.offset)
    return svc.playback_state()


@app.post("/api/playback/speed", response_model=PlaybackResponse)
def set_speed(req: SpeedRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    try:
        svc.session.clock.set_speed(req.speed, req.now_ms)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return svc.playback_state()


@app.post("/api/playback/loop", response_model=PlaybackResponse)
def set_loop(req: LoopRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    svc.session.clock.set_looping(req.enabled)
    return svc.playback_state()


@app.post("/api/playback/tick", response_model=PlaybackResponse)
def tick(req: NowRequest, svc: ReplayService = Depends(get_service)) -> PlaybackResponse:
    """Advance playback to the renderer's clock (one call per animation frame)."""
    svc.session.clock.tick(req.now_ms)
    return svc.playback_state()


@app.get("/api/coach", response_model=CoachResponse)
def coach(svc: ReplayService = Depends(get_service)) -> CoachResponse:
    status, speed_delta = svc.coach_update()
    return CoachResponse(
        status=status,
        speed_delta=speed_delta,
        messages=[
            CoachMessageModel(id=m.id, text=m.text, kind=m.kind, timestamp=m.timestamp)
            for m in svc.coach.messages
        ],
    )


@app.get("/api/report", response_model=ReportResponse)
def report(svc: ReplayService = Depends(get_service)) -> ReportResponse:
    """Session debrief with LLM feedback (rule-based when no API key is set)."""
    result = svc.report()
    _logger.info("Debrief generated for %s", result.source or "<no recording>")
    return ReportResponse(**result.to_dict())
