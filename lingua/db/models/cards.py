"""
Card table.

One row per card. Nested structures (icon, word data, exercise scores,
tags, examples) are stored as JSON in the same shape CardModel.to_dict()
produces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from lingua.core.card import CardModel, IconModel
from lingua.core.exercise_type import ExerciseType
from lingua.core.scoring import ExerciseScore
from lingua.core.words import word_data_from_dict, word_data_to_dict

from .base import Base, utcnow


class CardRecord(Base):
    """Persisted flashcard."""

    __tablename__ = "cards"

    # Ids are unique per user so one export can be imported by several users
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Content
    front_text: Mapped[str] = mapped_column(Text, nullable=False)
    back_text: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(String(16), nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    tags: Mapped[list[str]] = mapped_column(JSON, default=list)
    examples: Mapped[list[str]] = mapped_column(JSON, default=list)
    notes: Mapped[str | None] = mapped_column(Text)
    word_data: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    difficulty: Mapped[int] = mapped_column(Integer, default=1)
    german_article: Mapped[str | None] = mapped_column(String(8))

    # Legacy review counters
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    correct_count: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed: Mapped[datetime | None] = mapped_column()
    next_review: Mapped[datetime | None] = mapped_column()

    # Flags
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False)

    # Per-exercise scores keyed by exercise type value
    exercise_scores: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    __table_args__ = (
        Index("idx_cards_user_language", "user_id", "language"),
        Index("idx_cards_user_next_review", "user_id", "next_review"),
    )

    @classmethod
    def from_model(cls, card: CardModel, user_id: str) -> CardRecord:
        record = cls(id=card.id, user_id=user_id)
        record.update_from_model(card)
        return record

    def update_from_model(self, card: CardModel) -> None:
        self.front_text = card.front_text
        self.back_text = card.back_text
        self.language = card.language
        self.category = card.category
        self.icon = card.icon.to_dict() if card.icon else None
        self.tags = list(card.tags)
        self.examples = list(card.examples)
        self.notes = card.notes
        self.word_data = word_data_to_dict(card.word_data) if card.word_data else None
        self.difficulty = card.difficulty
        self.german_article = card.german_article
        self.review_count = card.review_count
        self.correct_count = card.correct_count
        self.last_reviewed = card.last_reviewed
        self.next_review = card.next_review
        self.is_favorite = card.is_favorite
        self.is_archived = card.is_archived
        self.exercise_scores = {t.value: s.to_dict() for t, s in card.exercise_scores.items()}
        self.created_at = card.created_at
        self.updated_at = card.updated_at

    def to_model(self) -> CardModel:
        scores = {}
        for key, raw in (self.exercise_scores or {}).items():
            exercise_type = ExerciseType.from_value(key)
            if exercise_type is not None:
                scores[exercise_type] = ExerciseScore.from_dict({**raw, "type": exercise_type.value})

        return CardModel(
            id=self.id,
            front_text=self.front_text,
            back_text=self.back_text,
            language=self.language,
            category=self.category,
            icon=IconModel.from_dict(self.icon) if self.icon else None,
            tags=tuple(self.tags or ()),
            examples=tuple(self.examples or ()),
            notes=self.notes,
            word_data=word_data_from_dict(self.word_data),
            difficulty=self.difficulty,
            german_article=self.german_article,
            review_count=self.review_count,
            correct_count=self.correct_count,
            last_reviewed=self.last_reviewed,
            next_review=self.next_review,
            created_at=self.created_at,
            updated_at=self.updated_at,
            is_favorite=self.is_favorite,
            is_archived=self.is_archived,
            exercise_scores=scores,
        )

    def __repr__(self) -> str:
        return f"<CardRecord id={self.id} front={self.front_text!r} language={self.language}>"
