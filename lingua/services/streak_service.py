"""
Streak service: records finished practice sessions against the user's streak.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from lingua.core.streak import StreakModel
from lingua.core.timeutil import resolve_now
from lingua.db.repositories import StreakRepository


@dataclass
class StreakUpdate:
    streak: StreakModel
    new_milestones: list[int]


class StreakService:
    def __init__(self, session: Session, user_id: str):
        self.repository = StreakRepository(session, user_id)
        self.user_id = user_id

    def load(self) -> StreakModel:
        return self.repository.load()

    def record_session(self, cards_reviewed: int, review_date: datetime | None = None) -> StreakUpdate:
        """
        Record a finished session of `cards_reviewed` cards.

        Raises:
            ValueError: If cards_reviewed is not positive
        """
        before = self.repository.load()
        after = before.update_with_review(cards_reviewed, review_date)
        self.repository.save(after)
        milestones = [m for m in after.achieved_milestones if m not in before.achieved_milestones]
        for milestone in milestones:
            logger.info(f"Streak milestone reached: {milestone} days")
        logger.debug(f"Streak for {self.user_id}: {after.current_streak} (best {after.best_streak})")
        return StreakUpdate(streak=after, new_milestones=milestones)

    def reset(self) -> StreakModel:
        logger.info(f"Resetting streak for {self.user_id}")
        return self.repository.reset()

    def daily_review_data(self, days: int = 7, today: date | None = None) -> list[tuple[date, int]]:
        """Cards reviewed per day for the last `days` days, oldest first."""
        streak = self.repository.load()
        end = today or resolve_now(None).date()
        return [
            (day, streak.cards_reviewed_on(day))
            for day in (end - timedelta(days=offset) for offset in range(days - 1, -1, -1))
        ]

    def statistics(self, today: date | None = None) -> dict[str, Any]:
        streak = self.repository.load()
        return {
            "current_streak": streak.current_streak,
            "best_streak": streak.best_streak,
            "is_active": streak.is_active(today),
            "needs_review_today": streak.needs_review_today(today),
            "total_review_sessions": streak.total_review_sessions,
            "total_cards_reviewed": streak.total_cards_reviewed,
            "cards_today": streak.cards_reviewed_on(today),
            "average_cards_per_day": round(streak.average_cards_per_day(today), 1),
            "achieved_milestones": list(streak.achieved_milestones),
            "next_milestone": streak.next_milestone,
            "status_message": streak.status_message(today),
            "motivation_message": streak.motivation_message,
        }
