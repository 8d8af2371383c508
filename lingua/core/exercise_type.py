"""
Exercise types available for flashcard practice.

Each exercise type tests a different language skill. Types carry their
own display metadata and decide whether they can be used for a given card.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lingua.core.card import CardModel


class ExerciseCategory(str, Enum):
    """Grouping of exercise types by the kind of recall they demand."""

    RECOGNITION = "recognition"  # passive recall
    PRODUCTION = "production"  # active recall / output

    @property
    def display_name(self) -> str:
        return self.value.title()

    @property
    def description(self) -> str:
        return {
            ExerciseCategory.RECOGNITION: "See or hear, then identify the meaning",
            ExerciseCategory.PRODUCTION: "Actively produce the translation",
        }[self]

    @property
    def exercise_types(self) -> list[ExerciseType]:
        """Implemented exercise types in this category."""
        return [t for t in ExerciseType.implemented() if t.category is self]


class ExerciseType(str, Enum):
    """Exercise types, valued by their persisted names."""

    READING_RECOGNITION = "reading_recognition"
    WRITING_TRANSLATION = "writing_translation"
    MULTIPLE_CHOICE_TEXT = "multiple_choice_text"
    MULTIPLE_CHOICE_ICON = "multiple_choice_icon"
    REVERSE_TRANSLATION = "reverse_translation"
    LISTENING_RECOGNITION = "listening_recognition"
    SPEAKING_PRONUNCIATION = "speaking_pronunciation"
    SENTENCE_FILL = "sentence_fill"
    SENTENCE_BUILDING = "sentence_building"
    CONJUGATION_PRACTICE = "conjugation_practice"
    ARTICLE_SELECTION = "article_selection"

    @classmethod
    def implemented(cls) -> list[ExerciseType]:
        """All implemented exercise types in declaration order."""
        return [t for t in cls if t.is_implemented]

    @classmethod
    def from_value(cls, value: str) -> ExerciseType | None:
        """Look up a type by persisted value, enum name or camelCase name; None if unknown."""
        snake = re.sub(r"(?<!^)(?=[A-Z])", "_", value).lower() if not value.isupper() else value.lower()
        try:
            return cls(snake)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def icon_name(self) -> str:
        """Iconify id representing this exercise type."""
        return _ICON_NAMES[self]

    @property
    def is_implemented(self) -> bool:
        return self not in _NOT_IMPLEMENTED

    @property
    def requires_icon(self) -> bool:
        return self is ExerciseType.MULTIPLE_CHOICE_ICON

    @property
    def benefits_from_icon(self) -> bool:
        return self is ExerciseType.READING_RECOGNITION

    @property
    def is_multiple_choice(self) -> bool:
        return self in (ExerciseType.MULTIPLE_CHOICE_TEXT, ExerciseType.MULTIPLE_CHOICE_ICON)

    @property
    def is_auto_graded(self) -> bool:
        """Whether the answer can be checked without the learner's own judgement."""
        return self is not ExerciseType.READING_RECOGNITION

    @property
    def category(self) -> ExerciseCategory:
        if self in _RECOGNITION:
            return ExerciseCategory.RECOGNITION
        return ExerciseCategory.PRODUCTION

    @property
    def is_recognition(self) -> bool:
        return self.category is ExerciseCategory.RECOGNITION

    @property
    def is_production(self) -> bool:
        return self.category is ExerciseCategory.PRODUCTION

    def can_use(self, card: CardModel, has_enough_cards_for_multiple_choice: bool) -> bool:
        """
        Check whether this exercise can be performed on a card.

        Args:
            card: Card to practice
            has_enough_cards_for_multiple_choice: Whether the deck can supply
                three distinct wrong answers

        Returns:
            True if the card carries everything the exercise needs
        """
        if not self.is_implemented:
            return False
        if self is ExerciseType.MULTIPLE_CHOICE_TEXT:
            return has_enough_cards_for_multiple_choice
        if self is ExerciseType.MULTIPLE_CHOICE_ICON:
            return has_enough_cards_for_multiple_choice and card.icon is not None
        if self is ExerciseType.ARTICLE_SELECTION:
            return card.resolved_article is not None
        if self is ExerciseType.CONJUGATION_PRACTICE:
            return card.word_data is not None and bool(card.word_data.inflected_forms())
        if self is ExerciseType.SENTENCE_BUILDING:
            return len(card.sentence_source.split()) >= 2
        return True


_DISPLAY_NAMES = {
    ExerciseType.READING_RECOGNITION: "Reading Recognition",
    ExerciseType.WRITING_TRANSLATION: "Writing Translation",
    ExerciseType.MULTIPLE_CHOICE_TEXT: "Multiple Choice (Text)",
    ExerciseType.MULTIPLE_CHOICE_ICON: "Multiple Choice (Icon)",
    ExerciseType.REVERSE_TRANSLATION: "Reverse Translation",
    ExerciseType.LISTENING_RECOGNITION: "Listening Recognition",
    ExerciseType.SPEAKING_PRONUNCIATION: "Speaking Pronunciation",
    ExerciseType.SENTENCE_FILL: "Sentence Fill",
    ExerciseType.SENTENCE_BUILDING: "Sentence Building",
    ExerciseType.CONJUGATION_PRACTICE: "Conjugation Practice",
    ExerciseType.ARTICLE_SELECTION: "Article Selection",
}

_DESCRIPTIONS = {
    ExerciseType.READING_RECOGNITION: "See the word and recall its meaning",
    ExerciseType.WRITING_TRANSLATION: "Type the correct translation",
    ExerciseType.MULTIPLE_CHOICE_TEXT: "Choose the correct meaning from options",
    ExerciseType.MULTIPLE_CHOICE_ICON: "Choose the matching icon",
    ExerciseType.REVERSE_TRANSLATION: "Translate from your native language",
    ExerciseType.LISTENING_RECOGNITION: "Listen and identify the word",
    ExerciseType.SPEAKING_PRONUNCIATION: "Speak the word correctly",
    ExerciseType.SENTENCE_FILL: "Complete the sentence with the word",
    ExerciseType.SENTENCE_BUILDING: "Arrange words in correct order",
    ExerciseType.CONJUGATION_PRACTICE: "Provide the correct form",
    ExerciseType.ARTICLE_SELECTION: "Choose the correct article",
}

_ICON_NAMES = {
    ExerciseType.READING_RECOGNITION: "mdi:book-open-page-variant",
    ExerciseType.WRITING_TRANSLATION: "mdi:pencil",
    ExerciseType.MULTIPLE_CHOICE_TEXT: "mdi:format-list-checks",
    ExerciseType.MULTIPLE_CHOICE_ICON: "mdi:image-multiple",
    ExerciseType.REVERSE_TRANSLATION: "mdi:swap-horizontal",
    ExerciseType.LISTENING_RECOGNITION: "mdi:ear-hearing",
    ExerciseType.SPEAKING_PRONUNCIATION: "mdi:microphone",
    ExerciseType.SENTENCE_FILL: "mdi:text-box",
    ExerciseType.SENTENCE_BUILDING: "mdi:reorder-horizontal",
    ExerciseType.CONJUGATION_PRACTICE: "mdi:transform",
    ExerciseType.ARTICLE_SELECTION: "mdi:label",
}

_NOT_IMPLEMENTED = frozenset({
    ExerciseType.LISTENING_RECOGNITION,
    ExerciseType.SPEAKING_PRONUNCIATION,
    ExerciseType.SENTENCE_FILL,
})

_RECOGNITION = frozenset({
    ExerciseType.READING_RECOGNITION,
    ExerciseType.MULTIPLE_CHOICE_TEXT,
    ExerciseType.MULTIPLE_CHOICE_ICON,
    ExerciseType.LISTENING_RECOGNITION,
    ExerciseType.ARTICLE_SELECTION,
})
