"""
Practice Session Engine.

Runs a queue of (card, exercise type) items built from due cards.

Queue building:
- prioritize_weaknesses on: each card contributes its weakest usable due
  exercise (never tried first, then lowest success rate) and the queue is
  ordered weakest first
- prioritize_weaknesses off: every usable due exercise of every card is
  queued and the queue is shuffled
- A card with no usable due exercise falls back to any usable enabled type

Session Flow:
1. start(): filter due cards, build the queue, prepare the first exercise
2. check_answer(response): grade (auto-graded types) and wait for confirmation
3. confirm_and_advance(marked_correct): record the result on the card,
   hand the updated card to the persistence callback, move on
4. summary(): totals once the queue is exhausted or end() was called
"""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from loguru import logger

from lingua.core.card import CardModel
from lingua.core.exercise_type import ExerciseType
from lingua.core.preferences import ExercisePreferences
from lingua.core.scoring import DEFAULT_POLICY, SchedulingPolicy
from lingua.core.timeutil import utc_now
from lingua.review.exercises import PreparedExercise, check_answer, prepare_exercise
from lingua.review.filters import (
    MIN_CARDS_FOR_MULTIPLE_CHOICE,
    filter_for_practice,
    has_enough_for_multiple_choice,
)


class AnswerState(str, Enum):
    """State of the current exercise."""

    PENDING = "pending"  # waiting for an answer
    ANSWERED = "answered"  # graded, waiting for confirmation


@dataclass(frozen=True)
class PracticeItem:
    """A single practice step: one exercise on one card."""

    card: CardModel
    exercise_type: ExerciseType


@dataclass
class SessionSummary:
    total_items: int
    completed_items: int
    correct_count: int
    incorrect_count: int
    duration: timedelta
    cards_reviewed: int

    @property
    def accuracy(self) -> float:
        """Share of correct answers as a percentage."""
        answered = self.correct_count + self.incorrect_count
        if answered == 0:
            return 0.0
        return self.correct_count / answered * 100


def weakness_key(card: CardModel, exercise_type: ExerciseType) -> float:
    """Sort key: never-tried exercises first (-1), then by success rate."""
    score = card.exercise_score(exercise_type)
    if score is None or score.total_attempts == 0:
        return -1.0
    return score.success_rate


def build_practice_queue(
    cards: Sequence[CardModel],
    preferences: ExercisePreferences,
    has_enough_cards_for_multiple_choice: bool,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[PracticeItem]:
    """Build the ordered practice queue for the given due cards."""
    rng = rng or random.Random()
    enabled = preferences.ordered_enabled_types()
    queue: list[PracticeItem] = []

    for card in cards:
        usable = [t for t in enabled if t.can_use(card, has_enough_cards_for_multiple_choice)]
        due = [t for t in usable if card.is_exercise_due(t, now)]
        candidates = due or usable
        if not candidates:
            logger.debug(f"No usable exercise for card {card.id}")
            continue

        if preferences.prioritize_weaknesses:
            weakest = min(candidates, key=lambda t: weakness_key(card, t))
            queue.append(PracticeItem(card, weakest))
        elif due:
            queue.extend(PracticeItem(card, t) for t in due)
        else:
            queue.append(PracticeItem(card, rng.choice(usable)))

    if preferences.prioritize_weaknesses:
        queue.sort(key=lambda item: weakness_key(item.card, item.exercise_type))
    else:
        rng.shuffle(queue)
    return queue


class PracticeSession:
    """
    Interactive practice over due cards.

    Args:
        cards: Cards to draw the session from (due filtering happens in start())
        preferences: Enabled exercise types and ordering mode
        all_cards: Full deck for multiple-choice distractors (defaults to cards)
        language: Active language code; empty means all
        policy: Interval policy applied to recorded results
        on_card_updated: Called with each updated card (persistence hook)
        rng: Random source for shuffling
        clock: Time source
    """

    def __init__(
        self,
        cards: Sequence[CardModel],
        preferences: ExercisePreferences | None = None,
        all_cards: Sequence[CardModel] | None = None,
        language: str = "",
        policy: SchedulingPolicy = DEFAULT_POLICY,
        on_card_updated: Callable[[CardModel], None] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
        min_cards_for_multiple_choice: int = MIN_CARDS_FOR_MULTIPLE_CHOICE,
    ):
        self.cards = list(cards)
        self.preferences = preferences or ExercisePreferences.defaults()
        self.all_cards = list(all_cards) if all_cards is not None else list(self.cards)
        self.language = language
        self.policy = policy
        self.on_card_updated = on_card_updated
        self.rng = rng or random.Random()
        self.clock = clock
        self.min_cards_for_multiple_choice = min_cards_for_multiple_choice

        self.queue: list[PracticeItem] = []
        self.current_index = 0
        self.is_active = False
        self.is_complete = False
        self.started_at: datetime | None = None
        self.ended_at: datetime | None = None
        self.correct_count = 0
        self.incorrect_count = 0
        self.answer_state = AnswerState.PENDING
        self.current_answer_correct: bool | None = None
        self.current_exercise: PreparedExercise | None = None
        self._latest: dict[str, CardModel] = {}
        self._reviewed_ids: set[str] = set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """
        Build the queue and prepare the first exercise.

        Returns:
            True if there is anything to practice
        """
        now = self.clock()
        due_cards = filter_for_practice(self.cards, self.preferences, self.language, now)
        # With no active language every practiced language must supply enough options
        languages = {self.language} if self.language else {card.language for card in due_cards}
        enough = bool(languages) and all(
            has_enough_for_multiple_choice(self.all_cards, self.min_cards_for_multiple_choice, language)
            for language in languages
        )
        self.queue = build_practice_queue(due_cards, self.preferences, enough, now, self.rng)

        self.current_index = 0
        self.correct_count = 0
        self.incorrect_count = 0
        self.is_complete = False
        self.is_active = bool(self.queue)
        self.started_at = now
        self.ended_at = None
        self._latest = {card.id: card for card in due_cards}
        self._reviewed_ids = set()
        self._reset_answer()

        logger.info(f"Practice session started: {len(due_cards)} due cards, {len(self.queue)} exercises")
        if self.is_active:
            self._prepare_current()
        return self.is_active

    def end(self) -> None:
        self.is_active = False
        self.ended_at = self.clock()
        self.current_exercise = None
        logger.info(
            f"Practice session ended: {self.correct_count} correct, {self.incorrect_count} incorrect"
        )

    # ------------------------------------------------------------------
    # Current item
    # ------------------------------------------------------------------

    @property
    def current(self) -> PracticeItem | None:
        if not self.is_active or self.current_index >= len(self.queue):
            return None
        item = self.queue[self.current_index]
        return PracticeItem(self._latest.get(item.card.id, item.card), item.exercise_type)

    @property
    def progress(self) -> float:
        """Completed share of the queue (0.0 to 1.0)."""
        if not self.queue:
            return 0.0
        done = self.correct_count + self.incorrect_count
        return min(1.0, done / len(self.queue))

    @property
    def remaining(self) -> int:
        return len(self.queue) - (self.correct_count + self.incorrect_count)

    def _reset_answer(self) -> None:
        self.answer_state = AnswerState.PENDING
        self.current_answer_correct = None

    def _prepare_current(self) -> None:
        item = self.current
        if item is None:
            self.current_exercise = None
            return
        self.current_exercise = prepare_exercise(item.card, item.exercise_type, self.all_cards, self.rng)

    # ------------------------------------------------------------------
    # Answering
    # ------------------------------------------------------------------

    def check_answer(self, response: str | Sequence[str] = "") -> bool | None:
        """
        Grade a response for the current exercise.

        Returns:
            True/False for auto-graded exercises, None when the learner
            grades themselves (reading recognition)
        """
        if self.current_exercise is None:
            raise RuntimeError("No active exercise")
        result = check_answer(self.current_exercise, response)
        self.answer_state = AnswerState.ANSWERED
        self.current_answer_correct = result
        return result

    def confirm_and_advance(self, marked_correct: bool | None = None) -> CardModel:
        """
        Record the result of the current exercise and move to the next one.

        Args:
            marked_correct: Final verdict; overrides the automatic grade.
                Defaults to the result of check_answer().

        Returns:
            The updated card
        """
        item = self.current
        if item is None:
            raise RuntimeError("No active exercise")
        verdict = marked_correct if marked_correct is not None else self.current_answer_correct
        if verdict is None:
            raise ValueError("Answer has not been graded; pass marked_correct")

        updated = item.card.with_exercise_result(item.exercise_type, verdict, self.clock(), self.policy)
        self._latest[updated.id] = updated
        self._reviewed_ids.add(updated.id)
        if self.on_card_updated is not None:
            self.on_card_updated(updated)

        if verdict:
            self.correct_count += 1
        else:
            self.incorrect_count += 1
        logger.debug(
            f"Recorded {item.exercise_type.value} on {updated.id}: {'correct' if verdict else 'incorrect'}"
        )

        self._reset_answer()
        if self.current_index + 1 >= len(self.queue):
            self.is_complete = True
            self.end()
        else:
            self.current_index += 1
            self._prepare_current()
        return updated

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    @property
    def updated_cards(self) -> list[CardModel]:
        """Latest version of every card answered in this session."""
        return [self._latest[card_id] for card_id in sorted(self._reviewed_ids)]

    def summary(self) -> SessionSummary:
        end = self.ended_at or self.clock()
        start = self.started_at or end
        return SessionSummary(
            total_items=len(self.queue),
            completed_items=self.correct_count + self.incorrect_count,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            duration=end - start,
            cards_reviewed=len(self._reviewed_ids),
        )
