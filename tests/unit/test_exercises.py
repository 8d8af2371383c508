"""
Unit tests for exercise preparation and answer checking.
"""

import random

import pytest

from lingua.core.card import IconModel
from lingua.core.exercise_type import ExerciseType
from lingua.core.words import NounData, VerbData
from lingua.review.exercises import check_answer, normalize, prepare_exercise


@pytest.fixture
def rng():
    return random.Random(42)


class TestPrepareExercise:
    """Tests for building exercise presentation data."""

    def test_writing_translation_prompts_front(self, make_card):
        prepared = prepare_exercise(make_card("der Hund", "dog"), ExerciseType.WRITING_TRANSLATION)

        assert prepared.prompt == "der Hund"
        assert prepared.expected_answer == "dog"
        assert prepared.options == []

    def test_reverse_translation_swaps_sides(self, make_card):
        prepared = prepare_exercise(make_card("der Hund", "dog"), ExerciseType.REVERSE_TRANSLATION)

        assert prepared.prompt == "dog"
        assert prepared.expected_answer == "der Hund"

    def test_multiple_choice_text_options(self, deck, rng):
        card = deck[0]
        prepared = prepare_exercise(card, ExerciseType.MULTIPLE_CHOICE_TEXT, deck, rng)

        assert len(prepared.options) == 4
        assert len(set(prepared.options)) == 4
        assert card.back_text in prepared.options

    def test_multiple_choice_skips_same_translation(self, make_card, rng):
        card = make_card("der Hund", "dog")
        deck = [card, make_card("der Köter", "dog"), make_card("die Katze", "cat")]

        prepared = prepare_exercise(card, ExerciseType.MULTIPLE_CHOICE_TEXT, deck, rng)
        assert sorted(prepared.options) == ["cat", "dog"]

    def test_multiple_choice_ignores_archived_and_other_languages(self, make_card, rng):
        card = make_card("der Hund", "dog")
        deck = [
            card,
            make_card("die Katze", "cat"),
            make_card("la casa", "house", language="es"),
            make_card("der Baum", "tree").with_changes(is_archived=True),
        ]

        prepared = prepare_exercise(card, ExerciseType.MULTIPLE_CHOICE_TEXT, deck, rng)
        assert sorted(prepared.options) == ["cat", "dog"]

    def test_multiple_choice_icon_uses_icon_ids(self, make_card, rng):
        cards = [
            make_card("der Hund", "dog", icon=IconModel.from_iconify("mdi:dog")),
            make_card("die Katze", "cat", icon=IconModel.from_iconify("mdi:cat")),
            make_card("das Haus", "house", icon=IconModel.from_iconify("mdi:home")),
            make_card("der Baum", "tree", icon=IconModel.from_iconify("mdi:tree")),
        ]
        prepared = prepare_exercise(cards[0], ExerciseType.MULTIPLE_CHOICE_ICON, cards, rng)

        assert prepared.expected_answer == "mdi:dog"
        assert sorted(prepared.options) == ["mdi:cat", "mdi:dog", "mdi:home", "mdi:tree"]
        assert [icon.id for icon in prepared.icon_options] == prepared.options

    def test_sentence_building_scrambles_example(self, make_card, rng):
        card = make_card(examples=["Der Hund bellt laut"])
        prepared = prepare_exercise(card, ExerciseType.SENTENCE_BUILDING, rng=rng)

        assert prepared.prompt == "dog"
        assert prepared.expected_answer == "Der Hund bellt laut"
        assert sorted(prepared.scrambled_words) == sorted(["Der", "Hund", "bellt", "laut"])

    def test_conjugation_asks_for_a_form(self, make_card, rng):
        card = make_card("laufen", "to run", word_data=VerbData(past_participle="gelaufen"))
        prepared = prepare_exercise(card, ExerciseType.CONJUGATION_PRACTICE, rng=rng)

        assert prepared.form_label == "past participle"
        assert prepared.expected_answer == "gelaufen"
        assert prepared.prompt == "laufen (past participle)"

    def test_article_selection(self, make_card):
        prepared = prepare_exercise(make_card("die Katze", "cat"), ExerciseType.ARTICLE_SELECTION)

        assert prepared.prompt == "Katze"
        assert prepared.expected_answer == "die"
        assert prepared.options == ["der", "die", "das"]

    def test_unimplemented_type_rejected(self, make_card):
        with pytest.raises(ValueError, match="not implemented"):
            prepare_exercise(make_card(), ExerciseType.LISTENING_RECOGNITION)


class TestCheckAnswer:
    """Tests for grading learner responses."""

    def test_normalize(self):
        assert normalize("  The   DOG ") == "the dog"

    @pytest.mark.parametrize("response, expected", [("dog", True), ("  DOG ", True), ("the dog", False), ("", False)])
    def test_writing_translation(self, make_card, response, expected):
        prepared = prepare_exercise(make_card("der Hund", "dog"), ExerciseType.WRITING_TRANSLATION)
        assert check_answer(prepared, response) is expected

    @pytest.mark.parametrize("response, expected", [("der Hund", True), ("Hund", True), ("die Hund", False)])
    def test_reverse_translation_article_optional(self, make_card, response, expected):
        prepared = prepare_exercise(make_card("der Hund", "dog"), ExerciseType.REVERSE_TRANSLATION)
        assert check_answer(prepared, response) is expected

    @pytest.mark.parametrize("response, expected", [("der Hund", True), ("Hund", True), ("die Hund", False)])
    def test_reverse_translation_uses_card_article(self, make_card, response, expected):
        card = make_card("Hund", "dog", german_article="der")
        prepared = prepare_exercise(card, ExerciseType.REVERSE_TRANSLATION)

        assert prepared.expected_answer == "Hund"
        assert check_answer(prepared, response) is expected

    def test_reading_recognition_is_self_graded(self, make_card):
        prepared = prepare_exercise(make_card(), ExerciseType.READING_RECOGNITION)

        assert prepared.is_self_graded
        assert check_answer(prepared, "anything") is None

    def test_multiple_choice_exact_option(self, deck, rng):
        prepared = prepare_exercise(deck[1], ExerciseType.MULTIPLE_CHOICE_TEXT, deck, rng)

        assert check_answer(prepared, "cat") is True
        assert check_answer(prepared, "dog") is False

    def test_sentence_building_accepts_word_list(self, make_card, rng):
        prepared = prepare_exercise(
            make_card(examples=["Der Hund bellt"]), ExerciseType.SENTENCE_BUILDING, rng=rng
        )

        assert check_answer(prepared, ["Der", "Hund", "bellt"]) is True
        assert check_answer(prepared, ["Hund", "Der", "bellt"]) is False

    def test_conjugation_article_optional(self, make_card, rng):
        card = make_card("der Hund", "dog", word_data=NounData(gender="der", plural="die Hunde"))
        prepared = prepare_exercise(card, ExerciseType.CONJUGATION_PRACTICE, rng=rng)

        assert prepared.form_label == "plural"
        assert check_answer(prepared, "Hunde") is True
        assert check_answer(prepared, "die Hunde") is True
        assert check_answer(prepared, "Hund") is False

    def test_article_selection(self, make_card):
        prepared = prepare_exercise(make_card("das Haus", "house"), ExerciseType.ARTICLE_SELECTION)

        assert check_answer(prepared, "Das") is True
        assert check_answer(prepared, "der") is False
