"""Session debrief: aggregation, LLM feedback and Markdown output."""

from ghost_replay.reporting.aggregator import SessionReportAggregator
from ghost_replay.reporting.formatter import MarkdownFormatter
from ghost_replay.reporting.llm_client import (
    DebriefClient,
    fallback_suggestions,
    parse_llm_response,
)
from ghost_replay.reporting.models import LapLine, SessionReport, Suggestion
from ghost_replay.reporting.prompt import PromptBuilder, estimate_tokens

__all__ = [
    "DebriefClient",
    "LapLine",
    "MarkdownFormatter",
    "PromptBuilder",
    "SessionReport",
    "SessionReportAggregator",
    "Suggestion",
    "estimate_tokens",
    "fallback_suggestions",
    "parse_llm_response",
]
