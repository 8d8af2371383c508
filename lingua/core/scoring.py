"""
Per-exercise scoring and spaced repetition scheduling.

Design:
- SchedulingPolicy: interval growth parameters (geometric, capped)
- ExerciseScore: immutable counter/date record for one exercise type on one card

Rules:
- Correct answer: streak + 1, next review after interval_for_streak(new streak)
- Incorrect answer: streak reset to 0, next review after the relearn delay (24h)
- Mastery label: threshold lookup on the streak counter
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

from lingua.core.exercise_type import ExerciseType
from lingua.core.mastery import DEFAULT_MASTERY_STREAK, MasteryLevel
from lingua.core.timeutil import from_iso, resolve_now, to_iso


@dataclass(frozen=True)
class SchedulingPolicy:
    """Interval growth parameters for consecutive correct answers."""

    base_interval_days: int = 3
    growth_factor: float = 2.0
    max_interval_days: int = 180
    relearn_interval_hours: int = 24
    mastery_streak: int = DEFAULT_MASTERY_STREAK

    def __post_init__(self):
        if self.base_interval_days < 1:
            raise ValueError("base_interval_days must be at least 1")
        if self.growth_factor <= 1.0:
            raise ValueError("growth_factor must be greater than 1")
        if self.max_interval_days < self.base_interval_days:
            raise ValueError("max_interval_days must be >= base_interval_days")
        if self.relearn_interval_hours <= 0:
            raise ValueError("relearn_interval_hours must be positive")
        if self.mastery_streak < 1:
            raise ValueError("mastery_streak must be at least 1")

    def interval_for_streak(self, streak: int) -> timedelta:
        """
        Review interval after reaching a chain of `streak` correct answers.

        Formula: min(base * growth^(streak - 1), max) days

        With the defaults: 3, 6, 12, 24, 48, 96, 180, 180, ... days
        """
        if streak < 1:
            return self.relearn_interval
        days = float(self.base_interval_days)
        for _ in range(streak - 1):
            days *= self.growth_factor
            if days >= self.max_interval_days:
                break
        return timedelta(days=min(days, self.max_interval_days))

    @property
    def relearn_interval(self) -> timedelta:
        return timedelta(hours=self.relearn_interval_hours)


DEFAULT_POLICY = SchedulingPolicy()


def _counter(data: dict[str, Any], key: str) -> int:
    """Stored counters are read leniently; negative values become 0."""
    return max(0, int(data.get(key, 0)))


@dataclass(frozen=True)
class ExerciseScore:
    """Performance statistics for one exercise type on one card."""

    type: ExerciseType
    correct_count: int = 0
    incorrect_count: int = 0
    current_streak: int = 0  # consecutive correct answers
    best_streak: int = 0
    last_practiced: datetime | None = None
    next_review: datetime | None = None

    def __post_init__(self):
        for name in ("correct_count", "incorrect_count", "current_streak", "best_streak"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    @classmethod
    def initial(cls, exercise_type: ExerciseType) -> ExerciseScore:
        return cls(type=exercise_type)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def total_attempts(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def success_rate(self) -> float:
        """Success rate as a percentage (0-100)."""
        if self.total_attempts == 0:
            return 0.0
        return self.correct_count / self.total_attempts * 100

    @property
    def net_score(self) -> int:
        return self.correct_count - self.incorrect_count

    def is_due(self, now: datetime | None = None) -> bool:
        """Due when never scheduled or the scheduled time has been reached."""
        if self.next_review is None:
            return True
        return self.next_review <= resolve_now(now)

    def mastery_level(self, mastery_streak: int = DEFAULT_MASTERY_STREAK) -> MasteryLevel:
        return MasteryLevel.from_streak(self.current_streak, self.total_attempts, mastery_streak)

    def mastery_progress(self, mastery_streak: int = DEFAULT_MASTERY_STREAK) -> float:
        """Progress toward mastery (0.0 to 1.0)."""
        return max(0.0, min(1.0, self.current_streak / mastery_streak))

    def answers_to_mastery(self, mastery_streak: int = DEFAULT_MASTERY_STREAK) -> int:
        return max(0, mastery_streak - self.current_streak)

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def record_correct(
        self,
        now: datetime | None = None,
        policy: SchedulingPolicy = DEFAULT_POLICY,
    ) -> ExerciseScore:
        """Return the score after a correct answer."""
        now = resolve_now(now)
        streak = self.current_streak + 1
        return replace(
            self,
            correct_count=self.correct_count + 1,
            current_streak=streak,
            best_streak=max(streak, self.best_streak),
            last_practiced=now,
            next_review=now + policy.interval_for_streak(streak),
        )

    def record_incorrect(
        self,
        now: datetime | None = None,
        policy: SchedulingPolicy = DEFAULT_POLICY,
    ) -> ExerciseScore:
        """Return the score after an incorrect answer: chain broken, relearn soon."""
        now = resolve_now(now)
        return replace(
            self,
            incorrect_count=self.incorrect_count + 1,
            current_streak=0,
            last_practiced=now,
            next_review=now + policy.relearn_interval,
        )

    def record(
        self,
        was_correct: bool,
        now: datetime | None = None,
        policy: SchedulingPolicy = DEFAULT_POLICY,
    ) -> ExerciseScore:
        if was_correct:
            return self.record_correct(now, policy)
        return self.record_incorrect(now, policy)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "correctCount": self.correct_count,
            "incorrectCount": self.incorrect_count,
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "lastPracticed": to_iso(self.last_practiced),
            "nextReview": to_iso(self.next_review),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExerciseScore:
        exercise_type = ExerciseType.from_value(str(data.get("type", "")))
        if exercise_type is None:
            raise ValueError(f"Unknown exercise type: {data.get('type')!r}")
        return cls(
            type=exercise_type,
            correct_count=_counter(data, "correctCount"),
            incorrect_count=_counter(data, "incorrectCount"),
            current_streak=_counter(data, "currentStreak"),
            best_streak=_counter(data, "bestStreak"),
            last_practiced=from_iso(data.get("lastPracticed")),
            next_review=from_iso(data.get("nextReview")),
        )

    def __str__(self) -> str:
        return (
            f"ExerciseScore(type: {self.type.display_name}, correct: {self.correct_count}, "
            f"incorrect: {self.incorrect_count}, streak: {self.current_streak}/{self.best_streak}, "
            f"rate: {self.success_rate:.1f}%)"
        )
