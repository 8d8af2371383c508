"""
Daily learning streak.

A streak counts consecutive calendar days (UTC) with at least one review
session. Reviewing twice on the same day keeps the streak, reviewing the
next day extends it, and any longer gap restarts it at 1.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any

from lingua.core.timeutil import date_key, from_iso, resolve_now, to_iso

STREAK_MILESTONES = (3, 7, 14, 21, 30, 50, 75, 100, 150, 200, 365)


def _today(today: date | None) -> date:
    return today if today is not None else resolve_now(None).date()


@dataclass(frozen=True)
class StreakModel:
    """User's learning streak data."""

    current_streak: int = 0
    best_streak: int = 0
    last_review_date: datetime | None = None
    total_review_sessions: int = 0
    total_cards_reviewed: int = 0
    daily_review_counts: dict[str, int] = field(default_factory=dict)  # YYYY-MM-DD -> cards
    achieved_milestones: tuple[int, ...] = ()
    streak_start_date: datetime | None = None
    best_streak_date: datetime | None = None

    @classmethod
    def initial(cls) -> StreakModel:
        return cls()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _days_since_last_review(self, today: date | None) -> int | None:
        if self.last_review_date is None:
            return None
        return (_today(today) - self.last_review_date.date()).days

    def is_active(self, today: date | None = None) -> bool:
        """Active when the last review was today or yesterday."""
        days = self._days_since_last_review(today)
        return days is not None and days <= 1

    def needs_review_today(self, today: date | None = None) -> bool:
        days = self._days_since_last_review(today)
        return days is None or days > 0

    def cards_reviewed_on(self, day: date | None = None) -> int:
        return self.daily_review_counts.get(date_key(_today(day)), 0)

    def average_cards_per_day(self, today: date | None = None) -> float:
        """Average cards per day over the days of the current streak."""
        if self.current_streak == 0:
            return 0.0
        end = _today(today)
        total = sum(
            self.daily_review_counts.get(date_key(end - timedelta(days=i)), 0)
            for i in range(self.current_streak)
        )
        return total / self.current_streak

    def new_milestones(self, previous_streak: int) -> list[int]:
        """Milestones crossed going from previous_streak to the current streak."""
        return [
            m
            for m in STREAK_MILESTONES
            if previous_streak < m <= self.current_streak and m not in self.achieved_milestones
        ]

    @property
    def next_milestone(self) -> int | None:
        for milestone in STREAK_MILESTONES:
            if milestone > self.current_streak:
                return milestone
        return None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update_with_review(
        self,
        cards_reviewed: int,
        review_date: datetime | None = None,
    ) -> StreakModel:
        """
        Record a finished review session.

        Args:
            cards_reviewed: Cards reviewed in the session (must be positive)
            review_date: When the session happened (defaults to now)

        Returns:
            Updated streak

        Raises:
            ValueError: If cards_reviewed is not positive
        """
        if cards_reviewed <= 0:
            raise ValueError("cards_reviewed must be positive")

        when = resolve_now(review_date)
        review_day = when.date()
        start_of_day = datetime.combine(review_day, datetime.min.time(), tzinfo=when.tzinfo)

        counts = dict(self.daily_review_counts)
        key = date_key(review_day)
        counts[key] = counts.get(key, 0) + cards_reviewed

        days = None
        if self.last_review_date is not None:
            days = (review_day - self.last_review_date.date()).days

        if days is not None and days < 0:
            # Backdated session: history and totals only
            return replace(
                self,
                total_review_sessions=self.total_review_sessions + 1,
                total_cards_reviewed=self.total_cards_reviewed + cards_reviewed,
                daily_review_counts=counts,
            )

        if days == 0:
            streak, start = self.current_streak, self.streak_start_date
        elif days == 1:
            streak, start = self.current_streak + 1, self.streak_start_date or start_of_day
        else:
            streak, start = 1, start_of_day

        # today counts even if stored data had the streak at 0
        streak = max(streak, 1)

        is_new_best = streak > self.best_streak
        updated = replace(
            self,
            current_streak=streak,
            best_streak=streak if is_new_best else self.best_streak,
            best_streak_date=when if is_new_best else self.best_streak_date,
            last_review_date=when,
            total_review_sessions=self.total_review_sessions + 1,
            total_cards_reviewed=self.total_cards_reviewed + cards_reviewed,
            daily_review_counts=counts,
            streak_start_date=start,
        )
        crossed = updated.new_milestones(self.current_streak)
        return replace(updated, achieved_milestones=self.achieved_milestones + tuple(crossed))

    def reset_streak(self) -> StreakModel:
        """Reset the current streak; totals, history and best streak are kept."""
        return replace(self, current_streak=0, last_review_date=None, streak_start_date=None)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def status_message(self, today: date | None = None) -> str:
        if self.current_streak == 0:
            return "Start your streak today!"
        active = self.is_active(today)
        if not active:
            return "Your streak ended. Start a new one!"
        if self.needs_review_today(today):
            return f"Keep your {self.current_streak}-day streak alive!"
        return f"{self.current_streak}-day streak! Great job!"

    @property
    def motivation_message(self) -> str:
        if self.current_streak == 0:
            return "Every journey begins with a single step!"
        if self.current_streak < 7:
            return "Building momentum! Keep going!"
        if self.current_streak < 30:
            return "Habit is forming! You're doing great!"
        if self.current_streak < 100:
            return "Incredible dedication! You're unstoppable!"
        return "LEGENDARY! You're a learning machine!"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentStreak": self.current_streak,
            "bestStreak": self.best_streak,
            "lastReviewDate": to_iso(self.last_review_date),
            "totalReviewSessions": self.total_review_sessions,
            "totalCardsReviewed": self.total_cards_reviewed,
            "dailyReviewCounts": dict(self.daily_review_counts),
            "achievedMilestones": list(self.achieved_milestones),
            "streakStartDate": to_iso(self.streak_start_date),
            "bestStreakDate": to_iso(self.best_streak_date),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StreakModel:
        return cls(
            current_streak=int(data.get("currentStreak", 0)),
            best_streak=int(data.get("bestStreak", 0)),
            last_review_date=from_iso(data.get("lastReviewDate")),
            total_review_sessions=int(data.get("totalReviewSessions", 0)),
            total_cards_reviewed=int(data.get("totalCardsReviewed", 0)),
            daily_review_counts={k: int(v) for k, v in (data.get("dailyReviewCounts") or {}).items()},
            achieved_milestones=tuple(int(m) for m in data.get("achievedMilestones") or ()),
            streak_start_date=from_iso(data.get("streakStartDate")),
            best_streak_date=from_iso(data.get("bestStreakDate")),
        )

    def __str__(self) -> str:
        return (
            f"StreakModel(current: {self.current_streak}, best: {self.best_streak}, "
            f"sessions: {self.total_review_sessions})"
        )
