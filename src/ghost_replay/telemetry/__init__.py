"""Telemetry recordings from the on-board data logger.

Public API
----------
TelemetryFrame      - single timestamped sample
TelemetryParser     - CSV row dict → TelemetryFrame
RecordingReader     - reads a CSV recording into frames
RecordingReadError  - raised on missing/unreadable recordings
build_manifest      - lists recordings in a data directory
"""

from ghost_replay.telemetry.manifest import RecordingEntry, build_manifest
from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.telemetry.parser import TelemetryParser, parse_coordinate
from ghost_replay.telemetry.reader import (
    RecordingNotFoundError,
    RecordingReader,
    RecordingReadError,
)

__all__ = [
    "RecordingEntry",
    "RecordingNotFoundError",
    "RecordingReadError",
    "RecordingReader",
    "TelemetryFrame",
    "TelemetryParser",
    "build_manifest",
    "parse_coordinate",
]
