"""Terminal replay: play a recording against its ideal-lap ghost.

Press Ctrl+C to quit.

Usage:
    python scripts/replay.py --file data/session.csv
    python scripts/replay.py --file data/session.csv --speed 4 --loop
    python scripts/replay.py --file data/session.csv --start 1500
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time

from dotenv import load_dotenv

load_dotenv()

from ghost_replay.analysis.ideal_lap import IdealLapSynthesizer  # noqa: E402
from ghost_replay.coaching.coach import PerformanceCoach, status_text  # noqa: E402
from ghost_replay.config import Settings  # noqa: E402
from ghost_replay.playback.session import ReplaySession  # noqa: E402
from ghost_replay.telemetry.reader import RecordingReadError  # noqa: E402

_TARGET_HZ = 30
_SLEEP = 1.0 / _TARGET_HZ


def _now_ms() -> float:
    return time.monotonic() * 1000


def _positive_float(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number, got {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Replay a CSV recording against the ideal lap")
    ap.add_argument("--file", required=True, help="CSV recording path")
    ap.add_argument("--speed", type=_positive_float, default=1.0, help="Playback speed multiplier")
    ap.add_argument("--start", type=int, default=0, help="Start frame index")
    ap.add_argument("--loop", action="store_true", help="Restart at the end of the recording")
    return ap


def main() -> None:
    settings = Settings.from_env()
    args = build_parser().parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    session = ReplaySession(
        synthesizer=IdealLapSynthesizer(
            micro_sector_m=settings.micro_sector_m, step_m=settings.resample_step_m
        )
    )
    try:
        session.load_file(args.file)
    except RecordingReadError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    if not session.frames:
        print("ERROR: recording contains no usable frames.", file=sys.stderr)
        sys.exit(1)

    clock = session.clock
    coach = PerformanceCoach()

    for s in session.lap_summaries():
        flag = "" if s.is_complete else "  (partial)"
        print(f"Lap {s.index:>2}: {s.lap_time:8.3f}s  {s.total_distance:7.0f} m{flag}")
    ideal = session.ideal_lap
    print(f"Ideal  : {ideal.lap_time:8.3f}s" if ideal else "Ideal  : n/a")
    print("\nReplaying. Ctrl+C to stop.\n")

    clock.seek(args.start)
    clock.set_looping(args.loop)
    clock.set_speed(args.speed, _now_ms())
    clock.play(_now_ms())

    try:
        while clock.is_playing:
            clock.tick(_now_ms())
            current = session.current_frame
            ghost = session.ghost_frame()

            message = coach.update(current, ghost, clock.index)
            if message is not None:
                print(f"\n  >> {message.text}")

            if ghost is None:
                status = status_text(current, session.laps)
                line = f"t={current.time:8.2f}s  {current.speed:6.1f} km/h  {status}"
            else:
                delta = current.speed - ghost.speed
                line = (
                    f"t={current.time:8.2f}s  {current.speed:6.1f} km/h  "
                    f"ghost {ghost.speed:6.1f} km/h  ({delta:+5.1f})"
                )
            print(f"\r[{clock.index:>6}/{len(session.frames) - 1}] {line}", end="", flush=True)

            time.sleep(_SLEEP)
    except KeyboardInterrupt:
        print("\n\nReplay stopped.")
        return

    print("\n\nEnd of recording.")


if __name__ == "__main__":
    main()
