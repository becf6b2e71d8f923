"""Session debrief script: generate a Markdown report from a data-logger CSV.

Usage:
  python scripts/analyze_recording.py \\
      --file data/session.csv \\
      --micro-sector-m 50 \\
      --output debrief.md

Needs the MOONSHOT_API_KEY environment variable (the rule-based fallback is
used when it is not set).
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from ghost_replay.analysis.ideal_lap import IdealLapSynthesizer
from ghost_replay.analysis.lap_detector import LapDetector
from ghost_replay.config import Settings
from ghost_replay.reporting.aggregator import SessionReportAggregator
from ghost_replay.reporting.formatter import MarkdownFormatter
from ghost_replay.reporting.llm_client import DebriefClient
from ghost_replay.telemetry.reader import RecordingReader, RecordingReadError


def main() -> None:
    load_dotenv()
    settings = Settings.from_env()

    ap = argparse.ArgumentParser(description="Generate a session debrief from a CSV recording")
    ap.add_argument("--file", required=True, help="CSV recording path")
    ap.add_argument(
        "--micro-sector-m",
        type=float,
        default=settings.micro_sector_m,
        help="Micro-sector length in metres used for the ideal lap",
    )
    ap.add_argument(
        "--step-m",
        type=float,
        default=settings.resample_step_m,
        help="Resampling resolution in metres",
    )
    ap.add_argument("--output", default="debrief.md", help="Output Markdown file path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Recording     : {args.file}")
    print(f"Micro-sector  : {args.micro_sector_m:.0f} m  step: {args.step_m:.1f} m")
    print()

    # ------------------------------------------------------------------
    # 1. Load telemetry frames
    # ------------------------------------------------------------------
    print("1/4  Loading telemetry frames...")
    try:
        frames = RecordingReader().read(args.file)
    except RecordingReadError as exc:
        print(f"  [!] {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"     {len(frames)} frames")

    # ------------------------------------------------------------------
    # 2. Laps + ideal lap
    # ------------------------------------------------------------------
    print("2/4  Detecting laps and building the ideal lap...")
    laps = LapDetector().detect(frames)
    complete = [lap for lap in laps if lap.is_complete]
    print(f"     {len(laps)} laps ({len(complete)} complete)")
    if not laps:
        print("  [!] No laps detected; is this a closed circuit?", file=sys.stderr)
        sys.exit(1)

    ideal = IdealLapSynthesizer(
        micro_sector_m=args.micro_sector_m, step_m=args.step_m
    ).synthesize_detailed(laps)
    if ideal is not None:
        print(f"     Ideal lap: {ideal.lap.lap_time:.3f}s")

    # ------------------------------------------------------------------
    # 3. Aggregate + LLM feedback
    # ------------------------------------------------------------------
    print("3/4  Aggregating debrief and calling the LLM...")
    report = SessionReportAggregator().aggregate(laps, ideal, source=args.file)
    report = DebriefClient().analyze(report)

    # ------------------------------------------------------------------
    # 4. Write Markdown
    # ------------------------------------------------------------------
    print(f"4/4  Writing report -> {args.output}")
    MarkdownFormatter().write(report, args.output)
    print(f"\n[OK] Done: {args.output}")


if __name__ == "__main__":
    main()
