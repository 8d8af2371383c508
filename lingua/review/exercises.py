"""
Exercise preparation and answer checking.

prepare_exercise() turns a (card, exercise type) pair into everything needed
to present the exercise: prompt, expected answer, shuffled options or
scrambled words. check_answer() grades a learner response against it.

Grading rules:
- Text answers are compared trimmed, case-insensitively, with runs of
  whitespace collapsed
- Reverse translation accepts the front text with or without its article,
  including the card's German article when the front text has none
- Conjugation accepts the expected form with or without a leading article
- Reading recognition is self-graded: check_answer() returns None
"""

from __future__ import annotations

import random
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from lingua.core.card import CardModel, IconModel
from lingua.core.exercise_type import ExerciseType
from lingua.core.words import GERMAN_ARTICLES
from lingua.review.filters import wrong_answer_candidates

WRONG_OPTION_COUNT = 3

_LEADING_ARTICLE = re.compile(r"^(der|die|das|ein|eine)\s+")


@dataclass
class PreparedExercise:
    """An exercise ready to be shown for one card."""

    exercise_type: ExerciseType
    card_id: str
    prompt: str
    expected_answer: str
    options: list[str] = field(default_factory=list)
    icon_options: list[IconModel] = field(default_factory=list)
    scrambled_words: list[str] = field(default_factory=list)
    form_label: str | None = None  # conjugation: which form is asked for
    article: str | None = None  # reverse translation: accepted article prefix

    @property
    def is_self_graded(self) -> bool:
        return not self.exercise_type.is_auto_graded


def normalize(text: str) -> str:
    return " ".join(text.split()).lower()


def _strip_article(text: str) -> str:
    return _LEADING_ARTICLE.sub("", text)


def _multiple_choice_options(
    card: CardModel,
    all_cards: Sequence[CardModel],
    rng: random.Random,
) -> list[str]:
    wrong: list[str] = []
    for other in wrong_answer_candidates(card, all_cards):
        if other.back_text not in wrong:
            wrong.append(other.back_text)
    options = [card.back_text, *rng.sample(wrong, min(WRONG_OPTION_COUNT, len(wrong)))]
    rng.shuffle(options)
    return options


def _icon_options(
    card: CardModel,
    all_cards: Sequence[CardModel],
    rng: random.Random,
) -> list[IconModel]:
    if card.icon is None:
        return []
    others: dict[str, IconModel] = {}
    for other in all_cards:
        if other.is_archived or other.language != card.language or other.icon is None:
            continue
        if other.id != card.id and other.icon.id != card.icon.id:
            others.setdefault(other.icon.id, other.icon)
    pool = list(others.values())
    options = [card.icon, *rng.sample(pool, min(WRONG_OPTION_COUNT, len(pool)))]
    rng.shuffle(options)
    return options


def prepare_exercise(
    card: CardModel,
    exercise_type: ExerciseType,
    all_cards: Sequence[CardModel] = (),
    rng: random.Random | None = None,
) -> PreparedExercise:
    """
    Build the presentation data for an exercise.

    Args:
        card: Card being practiced
        exercise_type: Exercise to prepare
        all_cards: Deck used to draw wrong answers for multiple choice
        rng: Random source for shuffling (seed it for reproducible output)

    Returns:
        PreparedExercise

    Raises:
        ValueError: If the exercise type is not implemented
    """
    if not exercise_type.is_implemented:
        raise ValueError(f"Exercise type not implemented: {exercise_type.value}")
    rng = rng or random.Random()
    prepared = PreparedExercise(
        exercise_type=exercise_type,
        card_id=card.id,
        prompt=card.front_text,
        expected_answer=card.back_text,
    )

    if exercise_type is ExerciseType.REVERSE_TRANSLATION:
        prepared.prompt = card.back_text
        prepared.expected_answer = card.front_text
        prepared.article = card.resolved_article

    elif exercise_type is ExerciseType.MULTIPLE_CHOICE_TEXT:
        prepared.options = _multiple_choice_options(card, all_cards, rng)

    elif exercise_type is ExerciseType.MULTIPLE_CHOICE_ICON:
        prepared.icon_options = _icon_options(card, all_cards, rng)
        prepared.options = [icon.id for icon in prepared.icon_options]
        prepared.expected_answer = card.icon.id if card.icon else ""

    elif exercise_type is ExerciseType.SENTENCE_BUILDING:
        sentence = card.sentence_source
        words = sentence.split()
        rng.shuffle(words)
        prepared.prompt = card.back_text
        prepared.expected_answer = sentence
        prepared.scrambled_words = words

    elif exercise_type is ExerciseType.CONJUGATION_PRACTICE:
        forms = card.word_data.inflected_forms() if card.word_data else {}
        if forms:
            label = rng.choice(sorted(forms))
            prepared.form_label = label
            prepared.expected_answer = forms[label]
        else:
            prepared.form_label = "base form"
            prepared.expected_answer = card.front_text
        prepared.prompt = f"{card.bare_front_text} ({prepared.form_label})"

    elif exercise_type is ExerciseType.ARTICLE_SELECTION:
        prepared.prompt = card.bare_front_text
        prepared.expected_answer = card.resolved_article or ""
        prepared.options = list(GERMAN_ARTICLES)

    return prepared


def check_answer(prepared: PreparedExercise, response: str | Sequence[str]) -> bool | None:
    """
    Grade a learner response.

    Args:
        prepared: Exercise as presented
        response: Typed text, chosen option, or ordered words for sentence building

    Returns:
        True/False for auto-graded exercises, None for self-graded ones
    """
    if prepared.is_self_graded:
        return None

    if not isinstance(response, str):
        response = " ".join(response)
    given = normalize(response)
    expected = normalize(prepared.expected_answer)
    if not given:
        return False

    exercise_type = prepared.exercise_type
    if exercise_type in (ExerciseType.MULTIPLE_CHOICE_TEXT, ExerciseType.MULTIPLE_CHOICE_ICON):
        return response.strip() == prepared.expected_answer
    if exercise_type is ExerciseType.REVERSE_TRANSLATION:
        bare = _strip_article(expected)
        accepted = {expected, bare}
        if prepared.article:
            accepted.add(f"{prepared.article.lower()} {bare}")
        return given in accepted
    if exercise_type is ExerciseType.CONJUGATION_PRACTICE:
        return given == expected or given == _strip_article(expected) or _strip_article(given) == expected
    return given == expected
