"""Tests for PlaybackClock — the replay state machine."""

from __future__ import annotations

import pytest

from ghost_replay.playback.clock import PlaybackClock
from ghost_replay.telemetry.models import TelemetryFrame


def _frames(n: int = 21, dt: float = 0.5) -> list[TelemetryFrame]:
    return [TelemetryFrame(time=i * dt, latitude=0.0, longitude=0.0) for i in range(n)]


@pytest.fixture
def changes() -> list[int]:
    return []


@pytest.fixture
def clock(changes) -> PlaybackClock:
    return PlaybackClock(_frames(), on_index_change=changes.append)


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


def test_initial_state(clock):
    assert clock.index == 0
    assert not clock.is_playing
    assert clock.state.speed == 1.0
    assert not clock.state.is_looping
    assert clock.current_frame.time == 0.0


def test_tick_while_paused_does_nothing(clock, changes):
    assert clock.tick(10_000) is False
    assert clock.index == 0
    assert changes == []


# ---------------------------------------------------------------------------
# Playing
# ---------------------------------------------------------------------------


def test_tick_advances_by_elapsed_time(clock):
    clock.play(0)
    assert clock.tick(1000) is True
    assert clock.state.playback_time == pytest.approx(1.0)
    assert clock.index == 2


def test_speed_multiplier_scales_elapsed_time(clock):
    clock.set_speed(2.0, 0)
    clock.play(0)
    clock.tick(500)
    assert clock.state.playback_time == pytest.approx(1.0)
    assert clock.index == 2


def test_slow_motion(clock):
    clock.set_speed(0.25, 0)
    clock.play(0)
    clock.tick(2000)
    assert clock.state.playback_time == pytest.approx(0.5)
    assert clock.index == 1


def test_short_tick_keeps_index(clock, changes):
    clock.play(0)
    assert clock.tick(100) is False
    assert clock.index == 0
    assert changes == []


def test_index_change_reported_once(clock, changes):
    clock.play(0)
    clock.tick(1000)
    clock.tick(1100)
    assert changes == [2]


def test_play_resumes_from_current_frame(clock):
    clock.seek(4)
    clock.play(5000)
    clock.tick(6000)
    assert clock.state.playback_time == pytest.approx(3.0)
    assert clock.index == 6


def test_pause_stops_advancing(clock):
    clock.play(0)
    clock.tick(1000)
    clock.pause()
    clock.tick(5000)
    assert clock.index == 2
    assert not clock.is_playing


def test_toggle(clock):
    clock.toggle(0)
    assert clock.is_playing
    clock.toggle(100)
    assert not clock.is_playing


def test_set_speed_resets_reference(clock):
    clock.play(0)
    clock.set_speed(4.0, 1000)
    clock.tick(1250)
    # Only the 250 ms after the change count, at 4x.
    assert clock.state.playback_time == pytest.approx(1.0)


def test_invalid_speed_rejected(clock):
    with pytest.raises(ValueError):
        clock.set_speed(0.0, 0)
    with pytest.raises(ValueError):
        clock.set_speed(-1.0, 0)
    with pytest.raises(ValueError):
        clock.set_speed(float("nan"), 0)
    assert clock.state.speed == 1.0


# ---------------------------------------------------------------------------
# End of recording
# ---------------------------------------------------------------------------


def test_end_pauses_without_loop(clock):
    clock.play(0)
    clock.tick(60_000)
    assert clock.index == 20
    assert not clock.is_playing


def test_end_wraps_with_loop(clock, changes):
    clock.set_looping(True)
    clock.play(0)
    clock.tick(60_000)
    assert clock.index == 0
    assert clock.is_playing
    assert clock.state.playback_time == 0.0
    assert changes == [20, 0]


def test_loop_continues_after_wrap(clock):
    clock.set_looping(True)
    clock.play(0)
    clock.tick(60_000)
    clock.tick(61_000)
    assert clock.index == 2


# ---------------------------------------------------------------------------
# Seeking
# ---------------------------------------------------------------------------


def test_seek_sets_time(clock):
    clock.seek(8)
    assert clock.index == 8
    assert clock.state.playback_time == pytest.approx(4.0)


def test_seek_clamps(clock):
    clock.seek(-5)
    assert clock.index == 0
    clock.seek(21 + 100)
    assert clock.index == 20


def test_seek_same_index_is_silent(clock, changes):
    clock.seek(0)
    assert changes == []


def test_seek_while_playing(clock):
    clock.play(0)
    clock.seek(10)
    clock.tick(1000)
    assert clock.is_playing
    assert clock.index == 12


def test_step(clock):
    clock.step(5)
    assert clock.index == 5
    clock.step(-100)
    assert clock.index == 0


# ---------------------------------------------------------------------------
# Empty recording
# ---------------------------------------------------------------------------


def test_empty_clock_is_inert():
    clock = PlaybackClock([])
    clock.play(0)
    clock.seek(10)
    clock.step(3)
    assert clock.tick(1000) is False
    assert clock.current_frame is None
    assert clock.index == 0
    assert not clock.is_playing
