"""
Flashcard domain model.

A card pairs a term (front) with its translation (back) and carries
per-exercise-type scores that drive spaced repetition. Cards are immutable;
every update returns a new instance.

Two review paths exist:
- Exercise practice: with_exercise_result() updates one ExerciseScore and
  schedules the card at the earliest exercise review.
- Legacy flip-card review: process_answer() uses a difficulty-based
  interval table.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from lingua.core.errors import CardValidationError
from lingua.core.exercise_type import ExerciseType
from lingua.core.mastery import MasteryLevel
from lingua.core.scoring import DEFAULT_POLICY, ExerciseScore, SchedulingPolicy
from lingua.core.timeutil import from_iso, resolve_now, to_iso
from lingua.core.words import (
    GERMAN_ARTICLES,
    NounData,
    WordData,
    word_data_from_dict,
    word_data_to_dict,
)

if TYPE_CHECKING:
    from lingua.core.preferences import ExercisePreferences

ICONIFY_SVG_URL = "https://api.iconify.design/{icon_id}.svg"

MIN_REVIEWS_FOR_MASTERY = 3
MIN_ATTEMPTS_FOR_OVERALL_MASTERY = 5

# Legacy review: base interval in days per difficulty level
DIFFICULTY_INTERVAL_DAYS = {1: 1, 2: 3, 3: 7, 4: 14, 5: 30}

_ARTICLE_PREFIX = re.compile(r"^(der|die|das)\s+", re.IGNORECASE)


class CardAnswer(str, Enum):
    """Answer given in a legacy flip-card review."""

    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIP = "skip"


@dataclass(frozen=True)
class IconModel:
    """Icon attached to a card, identified by its Iconify id ("set:name")."""

    id: str
    name: str
    set: str
    category: str = "Unknown"
    tags: tuple[str, ...] = ()
    svg_url: str = ""

    @classmethod
    def from_iconify(
        cls,
        icon_id: str,
        collection_name: str | None = None,
        tags: list[str] | None = None,
    ) -> IconModel:
        """
        Build an icon from an Iconify search hit.

        Args:
            icon_id: Iconify id such as "mdi:home-outline"
            collection_name: Human-readable name of the icon set
            tags: Optional search tags

        Returns:
            IconModel with a readable name and the SVG URL
        """
        icon_set, sep, raw_name = icon_id.partition(":")
        if not sep:
            icon_set, raw_name = "unknown", icon_id
        return cls(
            id=icon_id,
            name=raw_name.replace("-", " ").replace("_", " "),
            set=icon_set,
            category=collection_name or "Unknown",
            tags=tuple(tags or ()),
            svg_url=ICONIFY_SVG_URL.format(icon_id=icon_id),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "set": self.set,
            "category": self.category,
            "tags": list(self.tags),
            "svgUrl": self.svg_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IconModel:
        icon_id = data["id"]
        return cls(
            id=icon_id,
            name=data.get("name", icon_id),
            set=data.get("set", "unknown"),
            category=data.get("category", "Unknown"),
            tags=tuple(data.get("tags") or ()),
            svg_url=data.get("svgUrl") or data.get("svg_url") or ICONIFY_SVG_URL.format(icon_id=icon_id),
        )


def _initial_scores() -> dict[ExerciseType, ExerciseScore]:
    return {t: ExerciseScore.initial(t) for t in ExerciseType.implemented()}


@dataclass(frozen=True)
class CardModel:
    """A language learning card."""

    id: str
    front_text: str
    back_text: str
    language: str
    category: str
    created_at: datetime
    updated_at: datetime
    icon: IconModel | None = None
    tags: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    notes: str | None = None
    word_data: WordData | None = None
    difficulty: int = 1  # 1 (easiest) to 5
    german_article: str | None = None
    review_count: int = 0
    correct_count: int = 0
    last_reviewed: datetime | None = None
    next_review: datetime | None = None
    is_favorite: bool = False
    is_archived: bool = False
    exercise_scores: dict[ExerciseType, ExerciseScore] = field(default_factory=dict)

    def __post_init__(self):
        if self.review_count < 0 or self.correct_count < 0:
            raise CardValidationError("Review counters must be non-negative")
        if self.correct_count > self.review_count:
            raise CardValidationError("correct_count cannot exceed review_count")

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardModel):
            return NotImplemented
        return self.id == other.id

    @classmethod
    def create(
        cls,
        front_text: str,
        back_text: str,
        language: str,
        category: str,
        icon: IconModel | None = None,
        tags: list[str] | tuple[str, ...] = (),
        examples: list[str] | tuple[str, ...] = (),
        notes: str | None = None,
        word_data: WordData | None = None,
        difficulty: int = 1,
        german_article: str | None = None,
        now: datetime | None = None,
    ) -> CardModel:
        """
        Create a new card with a generated id, timestamps and initial scores.

        Raises:
            CardValidationError: On empty text, language or category, or a
                difficulty outside 1..5
        """
        validate_card_fields(front_text, back_text, language, category, difficulty)
        now = resolve_now(now)
        return cls(
            id=str(uuid.uuid4()),
            front_text=front_text.strip(),
            back_text=back_text.strip(),
            language=language.strip(),
            category=category.strip(),
            icon=icon,
            tags=tuple(tags),
            examples=tuple(examples),
            notes=notes,
            word_data=word_data,
            difficulty=difficulty,
            german_article=german_article,
            created_at=now,
            updated_at=now,
            exercise_scores=_initial_scores(),
        )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def success_rate(self) -> float:
        """Legacy success rate as a percentage (0-100)."""
        if self.review_count == 0:
            return 0.0
        return self.correct_count / self.review_count * 100

    def is_due(self, now: datetime | None = None) -> bool:
        if self.next_review is None:
            return True
        return self.next_review <= resolve_now(now)

    @property
    def mastery_level(self) -> MasteryLevel:
        """Card-level mastery from the legacy review counters."""
        return MasteryLevel.from_success_rate(
            self.success_rate, self.review_count, MIN_REVIEWS_FOR_MASTERY
        )

    @property
    def overall_mastery_level(self) -> MasteryLevel:
        """Mastery aggregated across all exercise scores."""
        if not self.exercise_scores:
            return self.mastery_level
        scores = self.exercise_scores.values()
        attempts = sum(s.total_attempts for s in scores)
        correct = sum(s.correct_count for s in scores)
        rate = correct / attempts * 100 if attempts else 0.0
        return MasteryLevel.from_success_rate(rate, attempts, MIN_ATTEMPTS_FOR_OVERALL_MASTERY)

    def exercise_score(self, exercise_type: ExerciseType) -> ExerciseScore | None:
        return self.exercise_scores.get(exercise_type)

    def is_exercise_due(self, exercise_type: ExerciseType, now: datetime | None = None) -> bool:
        """An exercise without a recorded score is always due."""
        score = self.exercise_scores.get(exercise_type)
        return score is None or score.is_due(now)

    def due_exercise_types(self, now: datetime | None = None) -> list[ExerciseType]:
        return [t for t, score in self.exercise_scores.items() if score.is_due(now)]

    def is_due_for_any_exercise(
        self,
        preferences: ExercisePreferences,
        now: datetime | None = None,
    ) -> bool:
        """Whether any enabled exercise type is due on this card."""
        return any(self.is_exercise_due(t, now) for t in preferences.enabled_types)

    @property
    def resolved_article(self) -> str | None:
        """
        German article for this card, if one can be determined.

        Checked in order: explicit german_article, noun gender, then an
        article prefix on the front text.
        """
        if self.german_article and self.german_article.lower() in GERMAN_ARTICLES:
            return self.german_article.lower()
        if isinstance(self.word_data, NounData) and self.word_data.article:
            return self.word_data.article
        match = _ARTICLE_PREFIX.match(self.front_text)
        if match:
            return match.group(1).lower()
        return None

    @property
    def bare_front_text(self) -> str:
        """Front text without a leading German article."""
        return _ARTICLE_PREFIX.sub("", self.front_text).strip()

    @property
    def sentence_source(self) -> str:
        """Sentence used for sentence building: first example, else front text."""
        for example in self.examples:
            if example.strip():
                return example.strip()
        return self.front_text.strip()

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def with_changes(self, **changes: Any) -> CardModel:
        """Copy-on-write update; also bumps updated_at unless given."""
        changes.setdefault("updated_at", resolve_now(None))
        return replace(self, **changes)

    def with_exercise_result(
        self,
        exercise_type: ExerciseType,
        was_correct: bool,
        now: datetime | None = None,
        policy: SchedulingPolicy = DEFAULT_POLICY,
    ) -> CardModel:
        """
        Record the outcome of one exercise.

        Updates that exercise's score and the legacy counters; the card's
        next review becomes the earliest scheduled exercise review.
        """
        now = resolve_now(now)
        current = self.exercise_scores.get(exercise_type) or ExerciseScore.initial(exercise_type)
        scores = dict(self.exercise_scores)
        scores[exercise_type] = current.record(was_correct, now, policy)

        scheduled = [s.next_review for s in scores.values() if s.next_review is not None]
        return replace(
            self,
            exercise_scores=scores,
            review_count=self.review_count + 1,
            correct_count=self.correct_count + (1 if was_correct else 0),
            last_reviewed=now,
            next_review=min(scheduled) if scheduled else self.next_review,
            updated_at=now,
        )

    def process_answer(self, answer: CardAnswer, now: datetime | None = None) -> CardModel:
        """Legacy flip-card review with difficulty-based intervals."""
        if answer is CardAnswer.SKIP:
            return self
        now = resolve_now(now)
        was_correct = answer is CardAnswer.CORRECT
        if was_correct:
            base = DIFFICULTY_INTERVAL_DAYS.get(self.difficulty, 1)
            multiplier = self.correct_count / (self.review_count + 1) + 1
            next_review = now + timedelta(days=round(base * multiplier))
        else:
            next_review = now + timedelta(days=1)
        return replace(
            self,
            review_count=self.review_count + 1,
            correct_count=self.correct_count + (1 if was_correct else 0),
            last_reviewed=now,
            next_review=next_review,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "frontText": self.front_text,
            "backText": self.back_text,
            "icon": self.icon.to_dict() if self.icon else None,
            "language": self.language,
            "category": self.category,
            "tags": list(self.tags),
            "examples": list(self.examples),
            "notes": self.notes,
            "wordData": word_data_to_dict(self.word_data) if self.word_data else None,
            "difficulty": self.difficulty,
            "germanArticle": self.german_article,
            "reviewCount": self.review_count,
            "correctCount": self.correct_count,
            "lastReviewed": to_iso(self.last_reviewed),
            "nextReview": to_iso(self.next_review),
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
            "isFavorite": self.is_favorite,
            "isArchived": self.is_archived,
            "exerciseScores": {t.value: s.to_dict() for t, s in self.exercise_scores.items()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CardModel:
        """Parse a card; unknown exercise types in the score map are skipped."""
        scores: dict[ExerciseType, ExerciseScore] = {}
        for key, raw in (data.get("exerciseScores") or {}).items():
            exercise_type = ExerciseType.from_value(key)
            if exercise_type is None:
                continue
            scores[exercise_type] = ExerciseScore.from_dict({**raw, "type": exercise_type.value})

        created_at = from_iso(data.get("createdAt")) or resolve_now(None)
        return cls(
            id=data["id"],
            front_text=data["frontText"],
            back_text=data["backText"],
            icon=IconModel.from_dict(data["icon"]) if data.get("icon") else None,
            language=data["language"],
            category=data["category"],
            tags=tuple(data.get("tags") or ()),
            examples=tuple(data.get("examples") or ()),
            notes=data.get("notes"),
            word_data=word_data_from_dict(data.get("wordData")),
            difficulty=int(data.get("difficulty", 1)),
            german_article=data.get("germanArticle"),
            review_count=int(data.get("reviewCount", 0)),
            correct_count=int(data.get("correctCount", 0)),
            last_reviewed=from_iso(data.get("lastReviewed")),
            next_review=from_iso(data.get("nextReview")),
            created_at=created_at,
            updated_at=from_iso(data.get("updatedAt")) or created_at,
            is_favorite=bool(data.get("isFavorite", False)),
            is_archived=bool(data.get("isArchived", False)),
            exercise_scores=scores,
        )

    def __str__(self) -> str:
        return f"CardModel(id: {self.id}, front: {self.front_text}, back: {self.back_text}, category: {self.category})"


def validate_card_fields(
    front_text: str,
    back_text: str,
    language: str,
    category: str,
    difficulty: int = 1,
) -> None:
    """Raise CardValidationError for missing text or an out-of-range difficulty."""
    if not front_text or not front_text.strip():
        raise CardValidationError("Front text cannot be empty")
    if not back_text or not back_text.strip():
        raise CardValidationError("Back text cannot be empty")
    if not language or not language.strip():
        raise CardValidationError("Language cannot be empty")
    if not category or not category.strip():
        raise CardValidationError("Category cannot be empty")
    if not 1 <= difficulty <= 5:
        raise CardValidationError(f"Difficulty must be between 1 and 5, got {difficulty}")
