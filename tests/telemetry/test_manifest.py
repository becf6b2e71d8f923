"""Tests for build_manifest — recording discovery."""

from __future__ import annotations

import os

import pytest

from ghost_replay.telemetry.manifest import build_manifest
from ghost_replay.telemetry.reader import RecordingReadError


def _touch(path, mtime: float, content: str = "Elapsed time (s)\n") -> None:
    path.write_text(content, encoding="utf-8")
    os.utime(path, (mtime, mtime))


def test_newest_first(tmp_path):
    _touch(tmp_path / "old.csv", 1_700_000_000)
    _touch(tmp_path / "new.csv", 1_700_000_500)
    _touch(tmp_path / "mid.csv", 1_700_000_200)
    names = [e.name for e in build_manifest(tmp_path)]
    assert names == ["new.csv", "mid.csv", "old.csv"]


def test_only_csv_files(tmp_path):
    _touch(tmp_path / "a.csv", 1_700_000_000)
    _touch(tmp_path / "notes.txt", 1_700_000_000)
    (tmp_path / "sub.csv").mkdir()
    names = [e.name for e in build_manifest(tmp_path)]
    assert names == ["a.csv"]


def test_entry_fields(tmp_path):
    _touch(tmp_path / "a.csv", 1_700_000_000, content="x" * 42)
    (entry,) = build_manifest(str(tmp_path))
    assert entry.path == str(tmp_path / "a.csv")
    assert entry.last_modified == 1_700_000_000_000
    assert entry.size == 42


def test_empty_directory(tmp_path):
    assert build_manifest(tmp_path) == []


def test_missing_directory(tmp_path):
    with pytest.raises(RecordingReadError):
        build_manifest(tmp_path / "nope")
