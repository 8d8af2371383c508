"""
Unit tests for duplicate card detection.
"""

import pytest

from lingua.duplicates import DuplicateDetectionConfig, DuplicateDetector, DuplicateMatchStrategy
from lingua.duplicates.detector import similarity


@pytest.fixture
def detector():
    return DuplicateDetector()


class TestStrategies:
    """Each strategy reports its fixed score."""

    def test_exact_match(self, detector, make_card):
        card, other = make_card("Hund", "dog"), make_card("Hund", "dog")
        [match] = detector.find_duplicates(card, [card, other])

        assert match.duplicate_card is other
        assert match.similarity_score == 1.0
        assert match.strategy is DuplicateMatchStrategy.EXACT_MATCH

    def test_case_insensitive_beats_whitespace(self, detector, make_card):
        card = make_card("Hund", "dog")
        [match] = detector.find_duplicates(card, [make_card("hund", "Dog")])

        assert match.strategy is DuplicateMatchStrategy.CASE_INSENSITIVE
        assert match.similarity_score == 0.98

    def test_normalized_whitespace(self, detector, make_card):
        card = make_card("der Hund", "dog")
        [match] = detector.find_duplicates(card, [make_card("der  Hund", "dog")])

        assert match.strategy is DuplicateMatchStrategy.NORMALIZED_WHITESPACE
        assert match.similarity_score == 0.95

    def test_same_front_different_back(self, detector, make_card):
        card = make_card("Bank", "bank")
        [match] = detector.find_duplicates(card, [make_card("Bank", "bench")])

        assert match.strategy is DuplicateMatchStrategy.SAME_FRONT_DIFFERENT_BACK
        assert match.reason == "Same term, different translation"

    def test_synonyms_only_in_strict(self, make_card):
        card = make_card("schnell", "fast")
        others = [make_card("rasch", "fast")]

        assert DuplicateDetector().find_duplicates(card, others) == []
        [match] = DuplicateDetector(DuplicateDetectionConfig.strict()).find_duplicates(card, others)
        assert match.strategy is DuplicateMatchStrategy.SAME_BACK_DIFFERENT_FRONT
        assert match.similarity_score == 0.85

    def test_fuzzy_match(self, detector, make_card):
        card = make_card("Schmetterling", "butterfly")
        [match] = detector.find_duplicates(card, [make_card("Schmeterling", "butterfly")])

        assert match.strategy is DuplicateMatchStrategy.FUZZY_MATCH
        assert match.similarity_score == pytest.approx((1 - 1 / 13 + 1.0) / 2)
        assert match.reason == "Similar content (96% match)"

    def test_unrelated_cards(self, detector, make_card):
        assert detector.find_duplicates(make_card("Hund", "dog"), [make_card("Katze", "cat")]) == []


class TestDetectorScope:
    def test_other_languages_ignored(self, detector, make_card):
        card = make_card("Hund", "dog")
        assert detector.find_duplicates(card, [make_card("Hund", "dog", language="nl")]) == []

    def test_cross_language_when_configured(self, make_card):
        detector = DuplicateDetector(DuplicateDetectionConfig(same_language_only=False))
        card = make_card("Hund", "dog")
        assert detector.has_duplicates(card, [make_card("Hund", "dog", language="nl")])

    def test_loose_skips_fuzzy_and_conflicts(self, make_card):
        detector = DuplicateDetector(DuplicateDetectionConfig.loose())
        card = make_card("Bank", "bank")
        assert detector.find_duplicates(card, [make_card("Bank", "bench"), make_card("Banks", "bank")]) == []

    def test_results_sorted_by_score(self, detector, make_card):
        card = make_card("Hund", "dog")
        matches = detector.find_duplicates(card, [make_card("Hund", "hound"), make_card("Hund", "dog")])
        assert [m.similarity_score for m in matches] == [1.0, 0.90]

    def test_find_all_duplicates(self, detector, deck, make_card):
        copy = make_card("der Hund", "dog")
        cards = [*deck, copy]

        result = detector.find_all_duplicates(cards)
        assert set(result) == {deck[0].id, copy.id}
        assert detector.cards_with_duplicates(cards) == [deck[0], copy]


class TestConfig:
    @pytest.mark.parametrize("name", ["standard", "STRICT", "loose"])
    def test_known_presets(self, name):
        assert isinstance(DuplicateDetectionConfig.preset(name), DuplicateDetectionConfig)

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown duplicate detection preset"):
            DuplicateDetectionConfig.preset("paranoid")


def test_similarity_bounds():
    assert similarity("abc", "abc") == 1.0
    assert similarity("", "abc") == 0.0
    assert similarity("hund", "hunde") == pytest.approx(0.8)
