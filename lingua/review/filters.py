"""
Card selection helpers shared by due-card counts and practice sessions.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from lingua.core.card import CardModel
from lingua.core.preferences import ExercisePreferences

MIN_CARDS_FOR_MULTIPLE_CHOICE = 4  # one correct answer plus three wrong ones


def filter_for_practice(
    cards: Iterable[CardModel],
    preferences: ExercisePreferences,
    language: str = "",
    now: datetime | None = None,
) -> list[CardModel]:
    """
    Cards that should appear in a practice session.

    Args:
        cards: Candidate cards
        preferences: Enabled exercise types
        language: Active language code; empty means all languages
        now: Reference time for due checks

    Returns:
        Non-archived cards in the language with at least one due enabled exercise
    """
    return [
        card
        for card in cards
        if not card.is_archived
        and (not language or card.language == language)
        and card.is_due_for_any_exercise(preferences, now)
    ]


def has_enough_for_multiple_choice(
    cards: Iterable[CardModel],
    minimum: int = MIN_CARDS_FOR_MULTIPLE_CHOICE,
    language: str = "",
) -> bool:
    """Whether active cards in the language offer `minimum` distinct answers."""
    answers = {
        card.back_text
        for card in cards
        if not card.is_archived and card.back_text.strip() and (not language or card.language == language)
    }
    return len(answers) >= minimum


def wrong_answer_candidates(card: CardModel, all_cards: Iterable[CardModel]) -> list[CardModel]:
    """Active cards in the same language whose back text differs and is not empty."""
    return [
        other
        for other in all_cards
        if other.id != card.id
        and not other.is_archived
        and other.language == card.language
        and other.back_text.strip()
        and other.back_text != card.back_text
    ]
