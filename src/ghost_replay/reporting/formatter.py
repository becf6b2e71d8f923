"""Markdown debrief formatter."""

from __future__ import annotations

from pathlib import Path

from ghost_replay.reporting.models import LapLine, SessionReport

_SEVERITY_LABEL: dict[str, str] = {
    "high": "High priority",
    "medium": "Medium priority",
    "low": "Low priority",
}


def _fmt_time(value: float | None) -> str:
    if value is None:
        return "—"
    minutes, seconds = divmod(value, 60)
    return f"{int(minutes)}:{seconds:06.3f}"


def _format_lap(line: LapLine) -> str:
    gap = "—" if line.gap_to_ideal_s is None else f"{line.gap_to_ideal_s:+.3f}s"
    best = " **best**" if line.is_best else ""
    return (
        f"| {line.lap_index}{best} | {_fmt_time(line.lap_time)} | "
        f"{line.total_distance:.0f} m | {gap} | {line.sectors_won} |"
    )


class MarkdownFormatter:
    """Format a :class:`~ghost_replay.reporting.models.SessionReport` as Markdown."""

    def format(self, report: SessionReport) -> str:
        """Return the full Markdown report as a string."""
        lines: list[str] = [
            "# Session Debrief",
            "",
            f"**Recording**: {report.source or 'unknown'}  ",
            f"**Laps**: {report.lap_count} ({report.complete_lap_count} complete)  ",
            f"**Best lap**: {_fmt_time(report.best_lap_time)}"
            + (f" (lap {report.best_lap_index})  " if report.best_lap_index is not None else "  "),
            f"**Ideal lap**: {_fmt_time(report.ideal_lap_time)}",
        ]
        if report.theoretical_gain_s is not None:
            lines.append(f"**Theoretical gain**: {report.theoretical_gain_s:.3f}s")
        lines.append("")

        if report.summary:
            lines += ["## Summary", "", report.summary, ""]

        if report.laps:
            lines += [
                "## Laps",
                "",
                "| Lap | Time | Distance | Gap to ideal | Micro-sectors won |",
                "|-----|------|----------|--------------|-------------------|",
            ]
            lines.extend(_format_lap(line) for line in report.laps)
            lines.append("")

        if report.top_improvements:
            lines += ["## Top improvements", ""]
            for i, s in enumerate(report.top_improvements[:3], 1):
                label = _SEVERITY_LABEL.get(s.severity, s.severity)
                where = f"Lap {s.lap_index}" if s.lap_index else "Session"
                lines.append(f"{i}. **{where}** [{label}]: {s.suggestion}")
            lines.append("")

        return "\n".join(lines)

    def write(self, report: SessionReport, path: str) -> None:
        """Write the formatted report to *path* (UTF-8)."""
        Path(path).write_text(self.format(report), encoding="utf-8")
