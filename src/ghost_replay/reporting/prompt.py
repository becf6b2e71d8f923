"""Prompt construction for the LLM session debrief."""

from __future__ import annotations

from ghost_replay.reporting.models import LapLine, SessionReport

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = """You are a professional racing driver coach who reviews data-logger sessions.

Hard rules:
1. Only use the telemetry figures supplied below. Never invent data.
2. Reply with the requested JSON object and nothing else.
3. Every suggestion must refer to a concrete figure and give an actionable direction.
4. The severity field may only be 'high', 'medium' or 'low'."""

_USER_TEMPLATE = """Session debrief data:

Recording: {source}
Laps: {lap_count} ({complete_lap_count} complete)
Best lap: {best}
Ideal lap (best micro-sectors combined): {ideal}
Theoretical gain on best lap: {gain}

Per lap:
{laps_text}

Reply strictly in this JSON format:
{{
  "summary": "1-2 sentences on the whole session",
  "suggestions": [
    {{"lap_index": <integer, 0 for the whole session>, "severity": "high|medium|low", "suggestion": "<actionable advice>"}}
  ]
}}"""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fmt_time(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.3f}s"


def _format_lap(line: LapLine) -> str:
    gap = "n/a" if line.gap_to_ideal_s is None else f"{line.gap_to_ideal_s:+.3f}s"
    best = " (best)" if line.is_best else ""
    return (
        f"[Lap {line.lap_index}]{best} time={line.lap_time:.3f}s "
        f"distance={line.total_distance:.0f}m gap_to_ideal={gap} "
        f"micro_sectors_won={line.sectors_won}"
    )


def estimate_tokens(text: str) -> int:
    """Rough token estimate (~4 characters per token)."""
    return max(1, len(text) // 4)


class PromptBuilder:
    """Builds ``(system_prompt, user_prompt)`` for a :class:`SessionReport`."""

    def build_messages(self, report: SessionReport) -> tuple[str, str]:
        laps_text = "\n".join(_format_lap(line) for line in report.laps) or "(no complete laps)"
        best = (
            f"lap {report.best_lap_index} in {_fmt_time(report.best_lap_time)}"
            if report.best_lap_index is not None
            else "n/a"
        )
        user = _USER_TEMPLATE.format(
            source=report.source or "unknown",
            lap_count=report.lap_count,
            complete_lap_count=report.complete_lap_count,
            best=best,
            ideal=_fmt_time(report.ideal_lap_time),
            gain=_fmt_time(report.theoretical_gain_s),
            laps_text=laps_text,
        )
        return _SYSTEM_PROMPT, user
