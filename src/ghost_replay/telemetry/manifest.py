"""Recording manifest — lists the CSV recordings available in a data directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ghost_replay.telemetry.reader import RecordingReadError


@dataclass
class RecordingEntry:
    """One recording file on disk."""

    name: str
    path: str
    last_modified: int
    """Modification time in milliseconds since the epoch."""

    size: int
    """File size in bytes."""


def build_manifest(data_dir: str | Path) -> list[RecordingEntry]:
    """Return the ``.csv`` files in *data_dir*, most recently modified first.

    Raises:
        RecordingReadError: If *data_dir* is not a directory.
    """
    root = Path(data_dir)
    if not root.is_dir():
        raise RecordingReadError(f"Data directory not found: {str(root)!r}")

    entries: list[RecordingEntry] = []
    for path in root.iterdir():
        if not path.is_file() or path.suffix.lower() != ".csv":
            continue
        stat = path.stat()
        entries.append(
            RecordingEntry(
                name=path.name,
                path=str(path),
                last_modified=int(stat.st_mtime * 1000),
                size=stat.st_size,
            )
        )
    entries.sort(key=lambda e: (e.last_modified, e.name), reverse=True)
    return entries
