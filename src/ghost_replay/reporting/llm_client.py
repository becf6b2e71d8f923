"""Moonshot AI (Kimi) LLM client for session debriefs.

Reads the API key from the ``MOONSHOT_API_KEY`` environment variable by
default.  Pass ``api_key`` explicitly in tests or when integrating with
secret managers.  Without a key no request is made and the rule-based
fallback is used.
"""

from __future__ import annotations

import json
import logging
import os

from openai import APIError, OpenAI, OpenAIError

from ghost_replay.reporting.models import SessionReport, Suggestion
from ghost_replay.reporting.prompt import PromptBuilder

_logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = frozenset({"high", "medium", "low"})

_FALLBACK_SUMMARY = "Rule-based debrief (LLM service unavailable)."

# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def parse_llm_response(raw: str) -> tuple[str, list[Suggestion]]:
    """Parse a JSON LLM response into ``(summary, suggestions)``.

    Returns ``("", [])`` on any parse or structure error.
    """
    try:
        data = json.loads(raw)
        summary = str(data.get("summary", ""))
        suggestions: list[Suggestion] = []
        for item in data.get("suggestions", []):
            severity = item.get("severity", "medium")
            if severity not in _SEVERITY_LEVELS:
                severity = "medium"
            suggestions.append(
                Suggestion(
                    lap_index=int(item.get("lap_index", 0)),
                    severity=severity,
                    suggestion=str(item["suggestion"]),
                )
            )
        return summary, suggestions
    except (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError):
        return "", []


def fallback_suggestions(report: SessionReport) -> list[Suggestion]:
    """Generate rule-based suggestions when the LLM API is unavailable."""
    suggestions: list[Suggestion] = []

    if report.complete_lap_count < 2:
        suggestions.append(
            Suggestion(
                lap_index=0,
                severity="low",
                suggestion="Record at least two complete laps to build an ideal lap for comparison.",
            )
        )
        return suggestions

    gain = report.theoretical_gain_s
    if gain is not None and report.best_lap_index is not None:
        if gain > 1.0:
            suggestions.append(
                Suggestion(
                    lap_index=report.best_lap_index,
                    severity="high",
                    suggestion=(
                        f"Your best lap is {gain:.2f}s off the ideal lap; "
                        "string your best micro-sectors together in a single lap."
                    ),
                )
            )
        elif gain > 0.3:
            suggestions.append(
                Suggestion(
                    lap_index=report.best_lap_index,
                    severity="medium",
                    suggestion=(
                        f"{gain:.2f}s separates your best lap from the ideal lap; "
                        "focus on consistency through every sector."
                    ),
                )
            )

    ideal = report.ideal_lap_time
    for line in report.laps:
        if line.is_best or line.gap_to_ideal_s is None or not ideal:
            continue
        if line.gap_to_ideal_s > 0.05 * ideal:
            suggestions.append(
                Suggestion(
                    lap_index=line.lap_index,
                    severity="medium",
                    suggestion=(
                        f"Lap {line.lap_index} lost {line.gap_to_ideal_s:.2f}s to the ideal lap; "
                        "compare it with the ghost to find where."
                    ),
                )
            )

    return suggestions


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class DebriefClient:
    """Moonshot AI (Kimi) chat completion client.

    Args:
        api_key: API key; falls back to ``MOONSHOT_API_KEY`` env variable.
        model: Model identifier (e.g. ``"kimi-k2"``).
        timeout: Request timeout in seconds.
    """

    BASE_URL = "https://api.moonshot.cn/v1"
    DEFAULT_MODEL = "kimi-k2"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
    ) -> None:
        key = api_key or os.environ.get("MOONSHOT_API_KEY", "")
        self._enabled = bool(key)
        self._client = OpenAI(api_key=key or "unset", base_url=self.BASE_URL, timeout=timeout)
        self._model = model

    def generate(self, system_prompt: str, user_prompt: str) -> tuple[str, dict]:
        """Call the LLM API and return ``(response_text, usage_dict)``.

        Returns ``("", {})`` without a key, on timeout or on any API error.
        API token usage is logged at ``INFO`` level.
        """
        if not self._enabled:
            _logger.info("MOONSHOT_API_KEY not set; skipping LLM debrief")
            return "", {}
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }
            _logger.info(
                "Moonshot API usage — prompt: %d, completion: %d, total: %d tokens",
                usage["prompt_tokens"],
                usage["completion_tokens"],
                usage["total_tokens"],
            )
            return response.choices[0].message.content or "", usage
        except (OpenAIError, APIError) as exc:
            _logger.warning("Moonshot API call failed: %s", exc)
            return "", {}

    def analyze(
        self, report: SessionReport, builder: PromptBuilder | None = None
    ) -> SessionReport:
        """Generate LLM feedback and apply to *report* (mutates + returns it).

        Falls back to rule-based suggestions when the API is unavailable.
        """
        if builder is None:
            builder = PromptBuilder()

        system_prompt, user_prompt = builder.build_messages(report)
        raw_text, _ = self.generate(system_prompt, user_prompt)

        if raw_text:
            summary, suggestions = parse_llm_response(raw_text)
            if suggestions or summary:
                severity_rank = {"high": 0, "medium": 1, "low": 2}
                report.summary = summary
                report.top_improvements = sorted(
                    suggestions, key=lambda s: severity_rank.get(s.severity, 1)
                )[:3]
                return report

        report.top_improvements = fallback_suggestions(report)[:3]
        report.summary = _FALLBACK_SUMMARY
        return report
