"""Tests for DebriefClient, response parsing, and the rule-based fallback."""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

from ghost_replay.reporting.llm_client import (
    DebriefClient,
    fallback_suggestions,
    parse_llm_response,
)
from ghost_replay.reporting.models import LapLine, SessionReport

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_report(**overrides) -> SessionReport:
    base = dict(
        source="tsukuba.csv",
        lap_count=4,
        complete_lap_count=3,
        best_lap_index=2,
        best_lap_time=61.5,
        ideal_lap_time=60.0,
        theoretical_gain_s=1.5,
        laps=[
            LapLine(1, 66.0, 1800.0, 6.0, sectors_won=1),
            LapLine(2, 61.5, 1800.0, 1.5, sectors_won=20, is_best=True),
            LapLine(3, 62.0, 1800.0, 2.0, sectors_won=15),
        ],
    )
    base.update(overrides)
    return SessionReport(**base)


def _make_openai_response(content: str, prompt_tokens: int = 100, completion_tokens: int = 50):
    mock = MagicMock()
    mock.choices[0].message.content = content
    mock.usage.prompt_tokens = prompt_tokens
    mock.usage.completion_tokens = completion_tokens
    mock.usage.total_tokens = prompt_tokens + completion_tokens
    return mock


# ---------------------------------------------------------------------------
# parse_llm_response tests
# ---------------------------------------------------------------------------


def test_parse_llm_response_valid():
    raw = json.dumps({
        "summary": "Consistent session.",
        "suggestions": [
            {"lap_index": 1, "severity": "high", "suggestion": "Brake later into T1."},
            {"lap_index": 0, "severity": "low", "suggestion": "Smooth throttle."},
        ],
    })
    summary, suggestions = parse_llm_response(raw)
    assert summary == "Consistent session."
    assert len(suggestions) == 2
    assert suggestions[0].lap_index == 1
    assert suggestions[0].severity == "high"
    assert suggestions[1].lap_index == 0


def test_parse_llm_response_invalid_json_returns_empty():
    assert parse_llm_response("not json {{") == ("", [])


def test_parse_llm_response_missing_fields_returns_empty():
    assert parse_llm_response("{}") == ("", [])


def test_parse_llm_response_missing_suggestion_text_returns_empty():
    raw = json.dumps({"summary": "x", "suggestions": [{"lap_index": 1}]})
    assert parse_llm_response(raw) == ("", [])


def test_parse_llm_response_invalid_severity_normalized_to_medium():
    raw = json.dumps({
        "summary": "ok",
        "suggestions": [{"lap_index": 1, "severity": "EXTREME", "suggestion": "x"}],
    })
    _, suggestions = parse_llm_response(raw)
    assert suggestions[0].severity == "medium"


# ---------------------------------------------------------------------------
# fallback_suggestions tests
# ---------------------------------------------------------------------------


def test_fallback_large_gain_is_high():
    suggestions = fallback_suggestions(_make_report())
    assert suggestions[0].severity == "high"
    assert suggestions[0].lap_index == 2
    assert "1.50s" in suggestions[0].suggestion


def test_fallback_moderate_gain_is_medium():
    suggestions = fallback_suggestions(_make_report(theoretical_gain_s=0.5))
    assert suggestions[0].severity == "medium"


def test_fallback_flags_slow_laps():
    suggestions = fallback_suggestions(_make_report())
    # Lap 1 is 6 s (10 %) off the ideal lap; lap 3 is within 5 %.
    flagged = [s.lap_index for s in suggestions if s.lap_index != 2]
    assert flagged == [1]


def test_fallback_too_few_laps():
    suggestions = fallback_suggestions(_make_report(complete_lap_count=1))
    assert len(suggestions) == 1
    assert suggestions[0].severity == "low"
    assert suggestions[0].lap_index == 0


def test_fallback_clean_session_returns_empty():
    report = _make_report(
        theoretical_gain_s=0.1,
        laps=[LapLine(1, 60.2, 1800.0, 0.2), LapLine(2, 60.1, 1800.0, 0.1, is_best=True)],
    )
    assert fallback_suggestions(report) == []


# ---------------------------------------------------------------------------
# DebriefClient tests (mocked)
# ---------------------------------------------------------------------------


def test_generate_success_returns_text_and_usage():
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        payload = json.dumps({"summary": "ok", "suggestions": []})
        mock_client.chat.completions.create.return_value = _make_openai_response(
            payload, prompt_tokens=80, completion_tokens=40
        )

        client = DebriefClient(api_key="test-key")
        text, usage = client.generate("sys", "user")

    assert text == payload
    assert usage == {"prompt_tokens": 80, "completion_tokens": 40, "total_tokens": 120}


def test_generate_logs_usage(caplog):
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.return_value = _make_openai_response(
            "{}", prompt_tokens=50, completion_tokens=20
        )

        with caplog.at_level(logging.INFO, logger="ghost_replay.reporting.llm_client"):
            client = DebriefClient(api_key="test-key")
            client.generate("sys", "user")

    assert any("50" in r.message and "20" in r.message for r in caplog.records)


def test_generate_api_error_returns_empty():
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        from openai import OpenAIError

        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError("server error")

        client = DebriefClient(api_key="test-key")
        text, usage = client.generate("sys", "user")

    assert text == ""
    assert usage == {}


def test_generate_without_key_makes_no_request(monkeypatch):
    monkeypatch.delenv("MOONSHOT_API_KEY", raising=False)
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client

        client = DebriefClient()
        text, usage = client.generate("sys", "user")

    assert (text, usage) == ("", {})
    mock_client.chat.completions.create.assert_not_called()


def test_api_key_read_from_environment(monkeypatch):
    monkeypatch.setenv("MOONSHOT_API_KEY", "env-key")
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        DebriefClient()
    assert MockOpenAI.call_args.kwargs["api_key"] == "env-key"
    assert MockOpenAI.call_args.kwargs["base_url"] == DebriefClient.BASE_URL


def test_analyze_applies_llm_suggestions_sorted_by_severity():
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        payload = json.dumps({
            "summary": "Good pace, lap 1 was messy.",
            "suggestions": [
                {"lap_index": 3, "severity": "low", "suggestion": "a"},
                {"lap_index": 1, "severity": "high", "suggestion": "b"},
                {"lap_index": 2, "severity": "medium", "suggestion": "c"},
                {"lap_index": 0, "severity": "low", "suggestion": "d"},
            ],
        })
        mock_client.chat.completions.create.return_value = _make_openai_response(payload)

        result = DebriefClient(api_key="test-key").analyze(_make_report())

    assert result.summary == "Good pace, lap 1 was messy."
    assert [s.severity for s in result.top_improvements] == ["high", "medium", "low"]
    assert [s.suggestion for s in result.top_improvements] == ["b", "c", "a"]


def test_analyze_falls_back_on_api_failure():
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        from openai import OpenAIError

        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError("down")

        result = DebriefClient(api_key="test-key").analyze(_make_report())

    assert len(result.top_improvements) > 0
    assert len(result.top_improvements) <= 3
    assert "LLM" in result.summary


def test_analyze_falls_back_on_unparseable_reply():
    with patch("ghost_replay.reporting.llm_client.OpenAI") as MockOpenAI:
        mock_client = MagicMock()
        MockOpenAI.return_value = mock_client
        mock_client.chat.completions.create.return_value = _make_openai_response("sorry, no")

        result = DebriefClient(api_key="test-key").analyze(_make_report())

    assert result.summary == "Rule-based debrief (LLM service unavailable)."
    assert result.top_improvements[0].severity == "high"
