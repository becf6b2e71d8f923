"""Pydantic request/response schemas for the replay API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class RecordingModel(BaseModel):
    name: str
    path: str
    last_modified: int
    size: int


class RecordingsResponse(BaseModel):
    data_dir: str
    recordings: list[RecordingModel]


class LoadRequest(BaseModel):
    path: str


class LoadResponse(BaseModel):
    source: str
    frame_count: int
    lap_count: int
    complete_lap_count: int
    ideal_lap_time: float | None


class LapModel(BaseModel):
    index: int
    lap_time: float
    total_distance: float
    is_complete: bool


class LapsResponse(BaseModel):
    laps: list[LapModel]
    ideal_lap_time: float | None
    sector_sources: list[int]


class FrameModel(BaseModel):
    """Subset of frame channels needed by renderers and gauges."""

    time: float
    latitude: float
    longitude: float
    speed: float
    rpm: float
    throttle: float
    brake: float
    gear: int
    steering: float
    g_force_lat: float
    g_force_lon: float
    altitude: float
    brake_pressure: float


class PlaybackResponse(BaseModel):
    index: int
    playback_time: float
    is_playing: bool
    speed: float
    is_looping: bool
    frame_count: int
    current_frame: FrameModel | None
    ghost_frame: FrameModel | None


class HistoryResponse(BaseModel):
    """Frames from the trailing window up to the current frame, oldest first."""

    window_s: float
    frames: list[FrameModel]


class NowRequest(BaseModel):
    now_ms: float = 0.0
    """Renderer clock in milliseconds (e.g. ``performance.now()``)."""


class SeekRequest(BaseModel):
    index: int


class StepRequest(BaseModel):
    offset: int


class SpeedRequest(BaseModel):
    speed: float = Field(gt=0)
    now_ms: float = 0.0


class LoopRequest(BaseModel):
    enabled: bool


class CoachMessageModel(BaseModel):
    id: int
    text: str
    kind: str
    timestamp: float


class CoachResponse(BaseModel):
    status: str
    speed_delta: float | None
    messages: list[CoachMessageModel]


class SuggestionModel(BaseModel):
    lap_index: int
    severity: str
    suggestion: str


class LapLineModel(BaseModel):
    lap_index: int
    lap_time: float
    total_distance: float
    gap_to_ideal_s: float | None
    sectors_won: int
    is_best: bool


class ReportResponse(BaseModel):
    source: str
    lap_count: int
    complete_lap_count: int
    best_lap_index: int | None
    best_lap_time: float | None
    ideal_lap_time: float | None
    theoretical_gain_s: float | None
    laps: list[LapLineModel]
    top_improvements: list[SuggestionModel]
    summary: str
