"""Recording listing, loading and lap endpoints."""

from __future__ import annotations

import pytest

from ghost_replay.config import Settings
from ghost_replay.web.service import ReplayService


def test_recordings_listed(client, data_dir):
    data = client.get("/api/recordings").json()
    assert data["data_dir"] == str(data_dir)
    names = {r["name"] for r in data["recordings"]}
    assert names == {"circuit.csv", "corrupt.csv"}


def test_recordings_missing_dir_404(client, tmp_path):
    from ghost_replay.web.app import app, get_service

    app.dependency_overrides[get_service] = lambda: ReplayService(
        Settings(data_dir=str(tmp_path / "nope"))
    )
    resp = client.get("/api/recordings")
    assert resp.status_code == 404


def test_load_session(client):
    resp = client.post("/api/session", json={"path": "circuit.csv"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["frame_count"] == 1601
    assert data["complete_lap_count"] == 3
    assert data["lap_count"] == 4
    assert data["ideal_lap_time"] == pytest.approx(40.0, abs=1.0)
    assert data["source"].endswith("circuit.csv")


def test_load_by_absolute_path(client, data_dir):
    resp = client.post("/api/session", json={"path": str(data_dir / "circuit.csv")})
    assert resp.status_code == 200


def test_load_missing_404(client):
    resp = client.post("/api/session", json={"path": "missing.csv"})
    assert resp.status_code == 404


def test_load_corrupt_422(client):
    resp = client.post("/api/session", json={"path": "corrupt.csv"})
    assert resp.status_code == 422


def test_failed_load_keeps_previous_session(loaded_client):
    loaded_client.post("/api/session", json={"path": "missing.csv"})
    laps = loaded_client.get("/api/laps").json()["laps"]
    assert len(laps) == 4


def test_laps_empty_before_load(client):
    data = client.get("/api/laps").json()
    assert data == {"laps": [], "ideal_lap_time": None, "sector_sources": []}


def test_laps_after_load(loaded_client):
    data = loaded_client.get("/api/laps").json()
    assert [lap["index"] for lap in data["laps"]] == [1, 2, 3, 4]
    assert [lap["is_complete"] for lap in data["laps"]] == [True, True, True, False]
    assert data["ideal_lap_time"] is not None
    assert set(data["sector_sources"]) <= {1, 2, 3}
