"""PerformanceCoach — short, rate-limited messages comparing the driver with the ghost."""

from __future__ import annotations

import random
import time
from collections.abc import Sequence
from dataclasses import dataclass

from ghost_replay.analysis.models import Lap
from ghost_replay.coaching.performance import PerformanceSnapshot, compare_frames
from ghost_replay.telemetry.models import TelemetryFrame

_POSITIVE = (
    "Great pace! You're gaining time!",
    "Flying! Keep it up!",
    "Faster than the ghost right now.",
    "Excellent exit speed!",
    "You're crushing this sector!",
    "Nailed that corner!",
    "Green sectors everywhere!",
    "Leave that ghost in the dust!",
)

_NEUTRAL = (
    "Perfect line through here.",
    "Matching the ideal lap perfectly.",
    "Smooth inputs, looking good.",
    "Right on target.",
    "Flowing nicely.",
    "Consistent and clean.",
    "Staying right with the ghost.",
)

_GENERIC_LOSS = (
    "Lost some speed there, try to carry more momentum.",
    "Losing time, push harder!",
)

_COASTING = (
    "Don't coast! Get back on power.",
    "Too much hesitation between brake and throttle.",
    "You're coasting, keep the momentum up.",
    "Minimize the time off pedals.",
    "No coasting allowed! Power or brakes.",
    "You're floating. Commit to a pedal.",
)

_OVERSTEERING = (
    "You're scrubbing speed with too much steering.",
    "Unwind the wheel, you're understeering.",
    "Smoother steering inputs needed.",
    "Let the car run wide on exit.",
    "Fighting the wheel too much.",
    "Less steering angle, more rotation.",
)

_BRAKE_HARDER = (
    "Press the brake harder!",
    "Ghost is braking with more pressure.",
    "Maximize your braking efficiency.",
    "Don't be afraid to stomp on the brakes.",
    "More initial bite on the brakes.",
    "Threshold braking! Push harder.",
)

_SHIFT = (
    "Shift up! You're hitting the limiter.",
    "Late shift? Watch your RPMs.",
    "Ghost shifted earlier.",
    "Optimize your shift points.",
    "Don't bounce off the limiter.",
    "Shift now!",
)

_LATE_THROTTLE_CORNER = (
    "Power out of the corner sooner.",
    "Unwind the wheel and get on gas.",
    "Late on throttle compared to ghost.",
    "Trust the rear grip on exit.",
    "Squeeze the throttle earlier.",
    "Don't wait, get on the power.",
)

_LATE_THROTTLE_STRAIGHT = (
    "Get on the gas earlier!",
    "Hesitating on throttle? Commit!",
    "Ghost is full throttle here, you should be too!",
    "Flat out! Why are you lifting?",
    "Full send! No lifting.",
)

_OVERBRAKING_CORNER = (
    "Trail braking too much?",
    "Release the brake to let the car turn.",
    "Overslowing mid-corner.",
    "Off the brakes to rotate.",
    "Let it roll through the apex.",
)

_OVERBRAKING_STRAIGHT = (
    "Braking too early?",
    "Trust the brakes, brake later.",
    "Overslowing on entry.",
    "Don't ride the brakes.",
    "Brake later and harder.",
    "Attack the braking zone.",
)

_LOW_CORNER_SPEED = (
    "Minimum corner speed is too low.",
    "Carry more speed to the apex.",
    "Trust the grip mid-corner.",
    "You're parking it on the apex.",
    "Roll more speed in.",
    "Don't overslow for the corner.",
)

_EMOJIS: dict[str, tuple[str, ...]] = {
    "positive": ("🚀", "🔥", "🏎️", "⚡", "💪", "🎯", "📈", "💨"),
    "neutral": ("✨", "⚖️", "👌", "🎯", "🧘", "✅", "🤝"),
    "info": ("📉", "⚠️", "🐢", "🤔", "👀"),
}


def _downshift_phrases(ghost_gear: int) -> tuple[str, ...]:
    return (
        f"Downshift! Ghost is in gear {ghost_gear}.",
        "Too high a gear for this corner.",
        "Engine bogging? Drop a gear.",
        "Use engine braking, downshift.",
        f"Ghost is using gear {ghost_gear}, try matching it.",
        "Revs are too low, shift down.",
    )


def feedback_phrases(
    current: TelemetryFrame, ghost: TelemetryFrame, snapshot: PerformanceSnapshot
) -> tuple[str, ...]:
    """Pick the phrase pool for a driver who is losing speed to the ghost.

    Rules are checked in priority order; the first match wins.
    """
    throttle_delta = ghost.throttle - current.throttle
    brake_delta = current.brake - ghost.brake
    cornering = abs(current.g_force_lat) > 0.5
    coasting = current.throttle < 5 and current.brake < 5
    steering_delta = abs(current.steering) - abs(ghost.steering)
    brake_pressure_delta = ghost.brake_pressure - current.brake_pressure
    rpm_delta = ghost.rpm - current.rpm

    if coasting and ghost.throttle > 10:
        return _COASTING
    if current.gear != ghost.gear and current.gear > ghost.gear:
        return _downshift_phrases(ghost.gear)
    if steering_delta > 15 and cornering:
        return _OVERSTEERING
    if brake_pressure_delta > 10 and current.brake > 0:
        return _BRAKE_HARDER
    if rpm_delta > 1000 and current.throttle > 90:
        return _SHIFT
    if throttle_delta > 20:
        return _LATE_THROTTLE_CORNER if cornering else _LATE_THROTTLE_STRAIGHT
    if brake_delta > 20:
        return _OVERBRAKING_CORNER if cornering else _OVERBRAKING_STRAIGHT
    if cornering and abs(snapshot.speed_delta) > 15:
        return _LOW_CORNER_SPEED
    return _GENERIC_LOSS


def status_text(current: TelemetryFrame | None, laps: Sequence[Lap]) -> str:
    """Explain why no ghost is available for *current*."""
    if current is None:
        return "Waiting for telemetry..."
    if laps and laps[0].frames and current.time >= laps[0].start_time:
        return "You are off the track / Invalid Lap"
    return "Waiting to get into track..."


@dataclass
class CoachMessage:
    """One line in the coach feed."""

    id: int
    text: str
    kind: str
    """``'positive'``, ``'neutral'`` or ``'info'``."""

    timestamp: float


class PerformanceCoach:
    """Turns driver-vs-ghost comparisons into an occasional coaching feed.

    At most one message is produced per *min_interval_s*.  Constructive
    feedback is only given some of the time so the feed does not nag.

    Parameters
    ----------
    min_interval_s:
        Minimum seconds between two messages.
    history:
        Number of messages kept (newest first).
    feedback_chance:
        Probability of a constructive message when the driver is losing speed.
    emoji_chance:
        Probability of prefixing a message with an emoji.
    _time_fn / _rng:
        Clock and random source — injectable for testing.
    """

    def __init__(
        self,
        min_interval_s: float = 3.0,
        history: int = 50,
        feedback_chance: float = 0.4,
        emoji_chance: float = 0.1,
        _time_fn=time.monotonic,
        _rng: random.Random | None = None,
    ) -> None:
        self._min_interval_s = min_interval_s
        self._history = history
        self._feedback_chance = feedback_chance
        self._emoji_chance = emoji_chance
        self._time_fn = _time_fn
        self._rng = _rng or random.Random()

        self._last_message: float = float("-inf")
        self._last_index: int | None = None
        self._next_id = 1
        self.messages: list[CoachMessage] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.messages = []
        self._last_message = float("-inf")

    def update(
        self,
        current: TelemetryFrame | None,
        ghost: TelemetryFrame | None,
        index: int = -1,
    ) -> CoachMessage | None:
        """Evaluate one playback instant; return the new message, if any.

        Playback moving to index 0 (loop wrap or seek to start) clears the
        feed; staying there does not.
        """
        if index == 0 and self._last_index != 0:
            self.reset()
        self._last_index = index
        if current is None or ghost is None:
            return None

        now = self._time_fn()
        if now - self._last_message < self._min_interval_s:
            return None

        snapshot = compare_frames(current, ghost)
        if snapshot.is_faster:
            kind, pool = "positive", _POSITIVE
        elif snapshot.is_good_speed and snapshot.is_good_line:
            kind, pool = "neutral", _NEUTRAL
        elif snapshot.speed_delta < -10 and self._rng.random() < self._feedback_chance:
            kind, pool = "info", feedback_phrases(current, ghost, snapshot)
        else:
            return None

        message = CoachMessage(
            id=self._next_id,
            text=self._decorate(self._rng.choice(pool), kind),
            kind=kind,
            timestamp=now,
        )
        self._next_id += 1
        self.messages = [message, *self.messages[: self._history - 1]]
        self._last_message = now
        return message

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _decorate(self, text: str, kind: str) -> str:
        if self._rng.random() >= self._emoji_chance:
            return text
        return f"{self._rng.choice(_EMOJIS[kind])} {text}"
