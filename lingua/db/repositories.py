"""
Repositories: domain-model access to the lingua-cards tables.

Each repository wraps a SQLAlchemy Session and is scoped to one user. They
flush but never commit; transaction boundaries belong to the caller
(session_scope() or the FastAPI session dependency).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from lingua.core.card import CardModel
from lingua.core.streak import StreakModel
from lingua.core.timeutil import resolve_now
from lingua.db.models import CardRecord, StreakRecord, UserSetting


class CardRepository:
    """Card storage for one user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def _query(self):
        return select(CardRecord).where(CardRecord.user_id == self.user_id)

    def get(self, card_id: str) -> CardModel | None:
        record = self.session.scalar(self._query().where(CardRecord.id == card_id))
        return record.to_model() if record else None

    def list(self, language: str | None = None, include_archived: bool = True) -> list[CardModel]:
        """Cards, newest first."""
        stmt = self._query()
        if language:
            stmt = stmt.where(CardRecord.language == language)
        if not include_archived:
            stmt = stmt.where(CardRecord.is_archived.is_(False))
        stmt = stmt.order_by(CardRecord.created_at.desc(), CardRecord.id)
        return [r.to_model() for r in self.session.scalars(stmt)]

    def save(self, card: CardModel) -> CardModel:
        """Insert or update a card."""
        record = self.session.scalar(self._query().where(CardRecord.id == card.id))
        if record is None:
            self.session.add(CardRecord.from_model(card, self.user_id))
            logger.debug(f"Inserted card {card.id}")
        else:
            record.update_from_model(card)
        self.session.flush()
        return card

    def save_many(self, cards: Iterable[CardModel]) -> int:
        count = 0
        for card in cards:
            self.save(card)
            count += 1
        return count

    def delete(self, card_id: str) -> bool:
        result = self.session.execute(
            delete(CardRecord).where(CardRecord.user_id == self.user_id, CardRecord.id == card_id)
        )
        return result.rowcount > 0

    def clear(self) -> int:
        result = self.session.execute(delete(CardRecord).where(CardRecord.user_id == self.user_id))
        logger.info(f"Deleted {result.rowcount} cards for user {self.user_id}")
        return result.rowcount

    def due_cards(self, now: datetime | None = None, language: str | None = None) -> list[CardModel]:
        """
        Non-archived cards with a card-level review due.

        Exercise-level due checks happen in the review filters; the card's
        next_review is the earliest of its exercise reviews.
        """
        now = resolve_now(now)
        stmt = self._query().where(
            CardRecord.is_archived.is_(False),
            or_(CardRecord.next_review.is_(None), CardRecord.next_review <= now),
        )
        if language:
            stmt = stmt.where(CardRecord.language == language)
        stmt = stmt.order_by(CardRecord.next_review.asc().nulls_first(), CardRecord.created_at)
        return [r.to_model() for r in self.session.scalars(stmt)]

    def search(self, query: str) -> list[CardModel]:
        """Case-insensitive substring search on front text, back text and category."""
        pattern = f"%{query.strip().lower()}%"
        stmt = self._query().where(
            or_(
                func.lower(CardRecord.front_text).like(pattern),
                func.lower(CardRecord.back_text).like(pattern),
                func.lower(CardRecord.category).like(pattern),
            )
        ).order_by(CardRecord.created_at.desc())
        return [r.to_model() for r in self.session.scalars(stmt)]

    def count(self) -> int:
        return self.session.scalar(
            select(func.count()).select_from(CardRecord).where(CardRecord.user_id == self.user_id)
        ) or 0

    def counts_by_language(self) -> dict[str, int]:
        stmt = (
            select(CardRecord.language, func.count())
            .where(CardRecord.user_id == self.user_id)
            .group_by(CardRecord.language)
        )
        return {language: count for language, count in self.session.execute(stmt)}

    def categories(self) -> list[str]:
        stmt = (
            select(CardRecord.category)
            .where(CardRecord.user_id == self.user_id)
            .distinct()
            .order_by(CardRecord.category)
        )
        return list(self.session.scalars(stmt))

    def tags(self) -> list[str]:
        """All tags in use, most used first."""
        counter: Counter[str] = Counter()
        for tags in self.session.scalars(select(CardRecord.tags).where(CardRecord.user_id == self.user_id)):
            counter.update(tags or [])
        return [tag for tag, _ in sorted(counter.items(), key=lambda item: (-item[1], item[0]))]


class StreakRepository:
    """Streak storage for one user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def load(self) -> StreakModel:
        """Stored streak, or an initial one."""
        record = self.session.get(StreakRecord, self.user_id)
        return record.to_model() if record else StreakModel.initial()

    def save(self, streak: StreakModel) -> StreakModel:
        record = self.session.get(StreakRecord, self.user_id)
        if record is None:
            record = StreakRecord(user_id=self.user_id)
            self.session.add(record)
        record.update_from_model(streak)
        self.session.flush()
        return streak

    def reset(self) -> StreakModel:
        """Reset the current streak, keeping statistics."""
        return self.save(self.load().reset_streak())

    def clear(self) -> None:
        """Delete all streak data."""
        self.session.execute(delete(StreakRecord).where(StreakRecord.user_id == self.user_id))


class SettingsRepository:
    """JSON key/value settings for one user."""

    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id

    def get_json(self, key: str, default: Any = None) -> Any:
        record = self.session.get(UserSetting, (self.user_id, key))
        return record.value if record is not None else default

    def set_json(self, key: str, value: Any) -> None:
        record = self.session.get(UserSetting, (self.user_id, key))
        if record is None:
            self.session.add(UserSetting(user_id=self.user_id, key=key, value=value))
        else:
            record.value = value
        self.session.flush()

    def delete(self, key: str) -> bool:
        result = self.session.execute(
            delete(UserSetting).where(UserSetting.user_id == self.user_id, UserSetting.key == key)
        )
        return result.rowcount > 0
