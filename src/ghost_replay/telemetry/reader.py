"""RecordingReader — loads a data-logger CSV export into a frame sequence."""

from __future__ import annotations

import csv
import logging
import os

from ghost_replay.telemetry.models import TelemetryFrame
from ghost_replay.telemetry.parser import TelemetryParser

_logger = logging.getLogger(__name__)


class RecordingReadError(Exception):
    """Raised when a recording file cannot be opened or decoded."""


class RecordingNotFoundError(RecordingReadError):
    """Raised when the recording file does not exist."""


class RecordingReader:
    """Reads a CSV recording into an ordered list of :class:`TelemetryFrame`.

    Rows lacking a valid position are skipped, as are rows whose timestamp
    goes backwards, so the result always has non-decreasing ``time``.

    Parameters
    ----------
    parser:
        Row parser.  Injected for testability; defaults to
        :class:`TelemetryParser`.
    """

    def __init__(self, parser: TelemetryParser | None = None) -> None:
        self._parser = parser or TelemetryParser()

    def read(self, path: str) -> list[TelemetryFrame]:
        """Return every usable frame in *path*.

        Raises
        ------
        RecordingReadError
            If the file cannot be decoded as CSV text.
        RecordingNotFoundError
            If the file does not exist.
        """
        if not os.path.isfile(path):
            raise RecordingNotFoundError(f"File not found: {path!r}")

        try:
            with open(path, newline="", encoding="utf-8-sig") as fh:
                return self.read_rows(csv.DictReader(fh), source=path)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise RecordingReadError(f"Could not read recording {path!r}: {exc}") from exc

    def read_rows(self, rows, source: str = "<rows>") -> list[TelemetryFrame]:
        """Parse an iterable of row dicts (e.g. a :class:`csv.DictReader`)."""
        frames: list[TelemetryFrame] = []
        skipped = 0
        for row in rows:
            frame = self._parser.parse(row)
            if frame is None or not frame.is_valid():
                skipped += 1
                continue
            if frames and frame.time < frames[-1].time:
                skipped += 1
                continue
            frames.append(frame)

        if skipped:
            _logger.warning("Skipped %d unusable row(s) in %s", skipped, source)
        _logger.info("Loaded %d frame(s) from %s", len(frames), source)
        return frames
