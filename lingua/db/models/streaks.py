"""Streak table: one row per user."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from lingua.core.streak import StreakModel

from .base import Base, utcnow


class StreakRecord(Base):
    """Persisted learning streak."""

    __tablename__ = "streaks"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_review_date: Mapped[datetime | None] = mapped_column()
    total_review_sessions: Mapped[int] = mapped_column(Integer, default=0)
    total_cards_reviewed: Mapped[int] = mapped_column(Integer, default=0)
    daily_review_counts: Mapped[dict[str, int]] = mapped_column(JSON, default=dict)
    achieved_milestones: Mapped[list[int]] = mapped_column(JSON, default=list)
    streak_start_date: Mapped[datetime | None] = mapped_column()
    best_streak_date: Mapped[datetime | None] = mapped_column()
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    def update_from_model(self, streak: StreakModel) -> None:
        self.current_streak = streak.current_streak
        self.best_streak = streak.best_streak
        self.last_review_date = streak.last_review_date
        self.total_review_sessions = streak.total_review_sessions
        self.total_cards_reviewed = streak.total_cards_reviewed
        self.daily_review_counts = dict(streak.daily_review_counts)
        self.achieved_milestones = list(streak.achieved_milestones)
        self.streak_start_date = streak.streak_start_date
        self.best_streak_date = streak.best_streak_date

    def to_model(self) -> StreakModel:
        return StreakModel(
            current_streak=self.current_streak,
            best_streak=self.best_streak,
            last_review_date=self.last_review_date,
            total_review_sessions=self.total_review_sessions,
            total_cards_reviewed=self.total_cards_reviewed,
            daily_review_counts=dict(self.daily_review_counts or {}),
            achieved_milestones=tuple(self.achieved_milestones or ()),
            streak_start_date=self.streak_start_date,
            best_streak_date=self.best_streak_date,
        )

    def __repr__(self) -> str:
        return f"<StreakRecord user={self.user_id} current={self.current_streak} best={self.best_streak}>"
