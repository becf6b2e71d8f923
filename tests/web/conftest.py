"""Shared fixtures for web tests."""

from __future__ import annotations

import csv

import pytest
from fastapi.testclient import TestClient

from ghost_replay.config import Settings
from ghost_replay.reporting.llm_client import DebriefClient
from ghost_replay.web.app import app, get_service
from ghost_replay.web.service import ReplayService

_HEADER = [
    "Elapsed time (s)",
    "Latitude",
    "Longitude",
    "Speed (km/h)",
    "Throttle Position (%)",
    "Gear ((null))",
]


def write_recording(path, frames) -> None:
    """Write *frames* as a data-logger CSV export (decimal coordinates)."""
    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(_HEADER)
        for f in frames:
            writer.writerow([repr(f.time), repr(f.latitude), repr(f.longitude), f.speed, f.throttle, f.gear])


@pytest.fixture
def data_dir(tmp_path, circuit_frames):
    """Data directory holding one valid and one corrupt recording."""
    write_recording(tmp_path / "circuit.csv", circuit_frames)
    (tmp_path / "corrupt.csv").write_bytes(b"Elapsed time (s),Latitude\n\xff\xfe,\x80\n")
    return tmp_path


@pytest.fixture
def service(data_dir, monkeypatch) -> ReplayService:
    monkeypatch.delenv("MOONSHOT_API_KEY", raising=False)
    return ReplayService(Settings(data_dir=str(data_dir)), llm_client=DebriefClient())


@pytest.fixture
def client(service):
    """FastAPI test client bound to a fresh replay service."""
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def loaded_client(client):
    """Test client with circuit.csv already loaded."""
    resp = client.post("/api/session", json={"path": "circuit.csv"})
    assert resp.status_code == 200
    return client
