"""
Duplicate card detection.

Strategies, in priority order (score in parentheses):
1. Exact match on front and back (1.0), definitive
2. Case-insensitive match (0.98)
3. Normalized whitespace match (0.95)
4. Same front, different back (0.90): likely an inconsistent translation
5. Same back, different front (0.85): likely synonyms, off by default
6. Fuzzy Levenshtein similarity on front and back (>= threshold), only
   when no other strategy matched

The best-scoring match per card pair is reported.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from rapidfuzz.distance import Levenshtein

from lingua.core.card import CardModel

_WHITESPACE = re.compile(r"\s+")


class DuplicateMatchStrategy(str, Enum):
    EXACT_MATCH = "exact_match"
    CASE_INSENSITIVE = "case_insensitive"
    NORMALIZED_WHITESPACE = "normalized_whitespace"
    SAME_FRONT_DIFFERENT_BACK = "same_front_different_back"
    SAME_BACK_DIFFERENT_FRONT = "same_back_different_front"
    FUZZY_MATCH = "fuzzy_match"


@dataclass(frozen=True)
class DuplicateMatch:
    """A detected duplicate with its similarity information."""

    duplicate_card: CardModel
    similarity_score: float  # 0.0 to 1.0
    strategy: DuplicateMatchStrategy
    reason: str


@dataclass(frozen=True)
class DuplicateDetectionConfig:
    """Which strategies run and how strict fuzzy matching is."""

    fuzzy_threshold: float = 0.85
    check_exact_match: bool = True
    check_case_insensitive: bool = True
    check_normalized_whitespace: bool = True
    check_fuzzy_match: bool = True
    check_same_front_different_back: bool = True
    check_same_back_different_front: bool = False
    same_language_only: bool = True

    @classmethod
    def standard(cls) -> DuplicateDetectionConfig:
        return cls()

    @classmethod
    def strict(cls) -> DuplicateDetectionConfig:
        """Catches more potential duplicates."""
        return cls(fuzzy_threshold=0.75, check_same_back_different_front=True)

    @classmethod
    def loose(cls) -> DuplicateDetectionConfig:
        """Basic exact/case/whitespace detection only."""
        return cls(
            check_fuzzy_match=False,
            check_same_front_different_back=False,
            check_same_back_different_front=False,
        )

    @classmethod
    def preset(cls, name: str) -> DuplicateDetectionConfig:
        presets = {"standard": cls.standard, "strict": cls.strict, "loose": cls.loose}
        try:
            return presets[name.lower()]()
        except KeyError:
            raise ValueError(f"Unknown duplicate detection preset: {name}") from None


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text.strip().lower())


def similarity(a: str, b: str) -> float:
    """Levenshtein similarity: 1 - distance / longer length."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return Levenshtein.normalized_similarity(a, b)


class DuplicateDetector:
    """Finds cards that duplicate or conflict with each other."""

    def __init__(self, config: DuplicateDetectionConfig | None = None):
        self.config = config or DuplicateDetectionConfig.standard()

    def find_duplicates(self, card: CardModel, all_cards: Sequence[CardModel]) -> list[DuplicateMatch]:
        """Matches for one card, highest similarity first."""
        matches = []
        for other in all_cards:
            if other.id == card.id:
                continue
            if self.config.same_language_only and other.language != card.language:
                continue
            match = self._best_match(card, other)
            if match is not None:
                matches.append(match)
        matches.sort(key=lambda m: m.similarity_score, reverse=True)
        return matches

    def find_all_duplicates(self, cards: Sequence[CardModel]) -> dict[str, list[DuplicateMatch]]:
        """Map of card id to its duplicates, for cards that have any."""
        result = {}
        for card in cards:
            matches = self.find_duplicates(card, cards)
            if matches:
                result[card.id] = matches
        return result

    def has_duplicates(self, card: CardModel, all_cards: Sequence[CardModel]) -> bool:
        return bool(self.find_duplicates(card, all_cards))

    def cards_with_duplicates(self, cards: Sequence[CardModel]) -> list[CardModel]:
        duplicated = self.find_all_duplicates(cards)
        return [card for card in cards if card.id in duplicated]

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _best_match(self, card: CardModel, other: CardModel) -> DuplicateMatch | None:
        config = self.config
        if config.check_exact_match and card.front_text == other.front_text and card.back_text == other.back_text:
            return DuplicateMatch(other, 1.0, DuplicateMatchStrategy.EXACT_MATCH, "Exact duplicate")

        front_ci = card.front_text.lower() == other.front_text.lower()
        back_ci = card.back_text.lower() == other.back_text.lower()
        front_norm = normalize_text(card.front_text) == normalize_text(other.front_text)
        back_norm = normalize_text(card.back_text) == normalize_text(other.back_text)

        candidates: list[DuplicateMatch] = []
        if config.check_case_insensitive and front_ci and back_ci:
            candidates.append(DuplicateMatch(
                other, 0.98, DuplicateMatchStrategy.CASE_INSENSITIVE, "Same content (case differs)"
            ))
        if config.check_normalized_whitespace and front_norm and back_norm:
            candidates.append(DuplicateMatch(
                other, 0.95, DuplicateMatchStrategy.NORMALIZED_WHITESPACE, "Same content (whitespace differs)"
            ))
        if config.check_same_front_different_back and front_norm and not back_norm:
            candidates.append(DuplicateMatch(
                other, 0.90, DuplicateMatchStrategy.SAME_FRONT_DIFFERENT_BACK, "Same term, different translation"
            ))
        if config.check_same_back_different_front and back_norm and not front_norm:
            candidates.append(DuplicateMatch(
                other,
                0.85,
                DuplicateMatchStrategy.SAME_BACK_DIFFERENT_FRONT,
                "Same translation, different terms (synonyms?)",
            ))
        if candidates:
            return max(candidates, key=lambda m: m.similarity_score)

        if config.check_fuzzy_match:
            return self._fuzzy_match(card, other)
        return None

    def _fuzzy_match(self, card: CardModel, other: CardModel) -> DuplicateMatch | None:
        threshold = self.config.fuzzy_threshold
        front = similarity(normalize_text(card.front_text), normalize_text(other.front_text))
        if front < threshold:
            return None
        back = similarity(normalize_text(card.back_text), normalize_text(other.back_text))
        if back < threshold:
            return None
        score = (front + back) / 2
        return DuplicateMatch(
            other, score, DuplicateMatchStrategy.FUZZY_MATCH, f"Similar content ({score * 100:.0f}% match)"
        )
