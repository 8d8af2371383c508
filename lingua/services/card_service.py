"""
Card management service.

Orchestrates card CRUD, filtering, statistics, import/export and exercise
result recording on top of CardRepository. Write operations go through the
rate limiter; card creation reports likely duplicates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger
from sqlalchemy.orm import Session

from lingua.core.card import CardModel, IconModel, validate_card_fields
from lingua.core.errors import CardNotFoundError, CardValidationError
from lingua.core.exercise_type import ExerciseType
from lingua.core.mastery import MasteryLevel
from lingua.core.rate_limit import RateLimiter
from lingua.core.scoring import DEFAULT_POLICY, SchedulingPolicy
from lingua.core.timeutil import resolve_now
from lingua.core.words import WordData
from lingua.db.repositories import CardRepository
from lingua.duplicates.detector import DuplicateDetector, DuplicateMatch, DuplicateMatchStrategy

# Shared per process so CLI commands and API requests count against one window
default_rate_limiter = RateLimiter()

# Fields that may be changed through update_card()
EDITABLE_FIELDS = frozenset({
    "front_text",
    "back_text",
    "language",
    "category",
    "icon",
    "tags",
    "examples",
    "notes",
    "word_data",
    "difficulty",
    "german_article",
    "is_favorite",
    "is_archived",
})


@dataclass
class CardFilter:
    """Criteria for filtered_cards(); empty values mean no restriction."""

    search: str = ""
    category: str | None = None
    language: str | None = None
    tags: list[str] = field(default_factory=list)  # all must be present
    due_only: bool = False
    favorites_only: bool = False
    include_archived: bool = False


@dataclass
class CardCreation:
    card: CardModel
    duplicates: list[DuplicateMatch] = field(default_factory=list)


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class CardStatistics:
    total: int
    active: int
    archived: int
    favorites: int
    due: int
    by_language: dict[str, int]
    categories: list[str]
    tags: list[str]
    average_success_rate: float
    mastery: dict[str, int]


class CardService:
    """Card operations for one user."""

    def __init__(
        self,
        session: Session,
        user_id: str,
        rate_limiter: RateLimiter | None = None,
        policy: SchedulingPolicy = DEFAULT_POLICY,
        detector: DuplicateDetector | None = None,
    ):
        self.repository = CardRepository(session, user_id)
        self.user_id = user_id
        self.rate_limiter = rate_limiter or default_rate_limiter
        self.policy = policy
        self.detector = detector or DuplicateDetector()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def get_card(self, card_id: str) -> CardModel:
        card = self.repository.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    def create_card(
        self,
        front_text: str,
        back_text: str,
        language: str,
        category: str,
        icon: IconModel | None = None,
        tags: list[str] | None = None,
        examples: list[str] | None = None,
        notes: str | None = None,
        word_data: WordData | None = None,
        difficulty: int = 1,
        german_article: str | None = None,
        reject_exact_duplicates: bool = False,
        now: datetime | None = None,
    ) -> CardCreation:
        """
        Validate, rate-limit and store a new card.

        Returns:
            The stored card and any likely duplicates already in the deck

        Raises:
            CardValidationError: On invalid fields, or an exact duplicate when
                reject_exact_duplicates is set
            RateLimitExceeded: When too many cards were created recently
        """
        card = CardModel.create(
            front_text=front_text,
            back_text=back_text,
            language=language,
            category=category,
            icon=icon,
            tags=_clean_tags(tags),
            examples=[e.strip() for e in examples or [] if e.strip()],
            notes=notes,
            word_data=word_data,
            difficulty=difficulty,
            german_article=german_article,
            now=now,
        )
        duplicates = self.detector.find_duplicates(card, self.repository.list(language=card.language))
        if reject_exact_duplicates and any(
            d.strategy is DuplicateMatchStrategy.EXACT_MATCH for d in duplicates
        ):
            raise CardValidationError(f"Card already exists: {card.front_text} -> {card.back_text}")

        self.rate_limiter.check(self.user_id, "card_creation")
        self.repository.save(card)
        if duplicates:
            logger.warning(f"Card {card.id} has {len(duplicates)} possible duplicate(s)")
        logger.info(f"Created card {card.id}: {card.front_text}")
        return CardCreation(card=card, duplicates=duplicates)

    def update_card(self, card_id: str, **changes: Any) -> CardModel:
        """
        Apply field changes to a card.

        Raises:
            CardNotFoundError: Unknown card id
            CardValidationError: Unknown field or invalid resulting card
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise CardValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        card = self.get_card(card_id)
        if "tags" in changes:
            changes["tags"] = tuple(_clean_tags(changes["tags"]))
        if "examples" in changes:
            changes["examples"] = tuple(changes["examples"] or ())
        updated = card.with_changes(**changes)
        validate_card_fields(
            updated.front_text, updated.back_text, updated.language, updated.category, updated.difficulty
        )
        self.rate_limiter.check(self.user_id, "card_update")
        self.repository.save(updated)
        logger.debug(f"Updated card {card_id}: {', '.join(sorted(changes))}")
        return updated

    def save_card(self, card: CardModel) -> CardModel:
        """Store an already-updated card (practice results, imports)."""
        return self.repository.save(card)

    def delete_card(self, card_id: str) -> None:
        self.rate_limiter.check(self.user_id, "card_delete")
        if not self.repository.delete(card_id):
            raise CardNotFoundError(card_id)
        logger.info(f"Deleted card {card_id}")

    def duplicate_card(self, card_id: str, now: datetime | None = None) -> CardModel:
        """Copy a card's content into a new card with fresh progress."""
        source = self.get_card(card_id)
        return self.create_card(
            front_text=f"{source.front_text} (Copy)",
            back_text=source.back_text,
            language=source.language,
            category=source.category,
            icon=source.icon,
            tags=list(source.tags),
            examples=list(source.examples),
            notes=source.notes,
            word_data=source.word_data,
            difficulty=source.difficulty,
            german_article=source.german_article,
            now=now,
        ).card

    def toggle_favorite(self, card_id: str) -> CardModel:
        card = self.get_card(card_id)
        return self.update_card(card_id, is_favorite=not card.is_favorite)

    def toggle_archive(self, card_id: str) -> CardModel:
        card = self.get_card(card_id)
        return self.update_card(card_id, is_archived=not card.is_archived)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def all_cards(self, language: str | None = None) -> list[CardModel]:
        return self.repository.list(language=language)

    def filtered_cards(self, criteria: CardFilter | None = None, now: datetime | None = None) -> list[CardModel]:
        """Cards matching every given criterion, newest first."""
        criteria = criteria or CardFilter()
        now = resolve_now(now)
        search = criteria.search.strip().lower()
        wanted_tags = {t.lower() for t in criteria.tags}

        result = []
        for card in self.repository.list(language=criteria.language or None):
            if card.is_archived and not criteria.include_archived:
                continue
            if criteria.category and card.category != criteria.category:
                continue
            if criteria.favorites_only and not card.is_favorite:
                continue
            if criteria.due_only and not card.is_due(now):
                continue
            if wanted_tags and not wanted_tags <= {t.lower() for t in card.tags}:
                continue
            if search and not any(
                search in text.lower() for text in (card.front_text, card.back_text, card.category, *card.tags)
            ):
                continue
            result.append(card)
        return result

    def statistics(self, language: str | None = None, now: datetime | None = None) -> CardStatistics:
        now = resolve_now(now)
        cards = self.repository.list(language=language)
        active = [c for c in cards if not c.is_archived]
        reviewed = [c for c in cards if c.review_count > 0]
        mastery = {level.value: 0 for level in MasteryLevel}
        for card in active:
            mastery[card.overall_mastery_level.value] += 1

        return CardStatistics(
            total=len(cards),
            active=len(active),
            archived=len(cards) - len(active),
            favorites=sum(1 for c in cards if c.is_favorite),
            due=sum(1 for c in active if c.is_due(now)),
            by_language=self.repository.counts_by_language(),
            categories=self.repository.categories(),
            tags=self.repository.tags(),
            average_success_rate=(
                sum(c.success_rate for c in reviewed) / len(reviewed) if reviewed else 0.0
            ),
            mastery=mastery,
        )

    def find_duplicates(self, language: str | None = None) -> dict[str, list[DuplicateMatch]]:
        return self.detector.find_all_duplicates(self.repository.list(language=language))

    # ------------------------------------------------------------------
    # Practice
    # ------------------------------------------------------------------

    def record_exercise_result(
        self,
        card_id: str,
        exercise_type: ExerciseType,
        was_correct: bool,
        now: datetime | None = None,
    ) -> CardModel:
        card = self.get_card(card_id)
        updated = card.with_exercise_result(exercise_type, was_correct, now, self.policy)
        self.repository.save(updated)
        return updated

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_cards(self, language: str | None = None) -> list[dict[str, Any]]:
        return [card.to_dict() for card in self.repository.list(language=language)]

    def import_cards(self, rows: list[dict[str, Any]], now: datetime | None = None) -> ImportResult:
        """
        Import cards from exported dicts or simple {front, back, language, category} rows.

        Invalid rows are skipped and reported; exported cards keep their ids
        and progress.
        """
        result = ImportResult()
        for index, row in enumerate(rows, start=1):
            try:
                card = _card_from_row(row, now)
                self.rate_limiter.check(self.user_id, "card_bulk_create")
            except (CardValidationError, KeyError, TypeError, ValueError) as e:
                result.skipped += 1
                result.errors.append(f"Row {index}: {e}")
                logger.warning(f"Skipping import row {index}: {e}")
                continue
            self.repository.save(card)
            result.imported += 1
        logger.info(f"Imported {result.imported} cards, skipped {result.skipped}")
        return result


def _clean_tags(tags: list[str] | tuple[str, ...] | None) -> list[str]:
    seen: list[str] = []
    for tag in tags or ():
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _card_from_row(row: dict[str, Any], now: datetime | None) -> CardModel:
    if "frontText" in row and "id" in row:
        card = CardModel.from_dict(row)
        validate_card_fields(card.front_text, card.back_text, card.language, card.category, card.difficulty)
        return card
    return CardModel.create(
        front_text=str(row.get("front") or row.get("frontText") or ""),
        back_text=str(row.get("back") or row.get("backText") or ""),
        language=str(row.get("language") or ""),
        category=str(row.get("category") or ""),
        tags=_clean_tags(row.get("tags")),
        examples=row.get("examples") or (),
        notes=row.get("notes"),
        difficulty=int(row.get("difficulty", 1)),
        german_article=row.get("germanArticle") or row.get("german_article"),
        now=now,
    )
