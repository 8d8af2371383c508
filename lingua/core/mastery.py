"""
Mastery levels.

Categorical labels derived from per-exercise answer chains (streak based)
or from aggregate success rates (legacy card-level view).
"""

from __future__ import annotations

from enum import Enum

DEFAULT_MASTERY_STREAK = 5


class MasteryLevel(str, Enum):
    """
    Mastery level categorization.

    Ordered from weakest to strongest; NEW means no attempts yet.
    """

    NEW = "New"
    DIFFICULT = "Difficult"
    LEARNING = "Learning"
    GOOD = "Good"
    MASTERED = "Mastered"

    @classmethod
    def from_streak(
        cls,
        streak: int,
        total_attempts: int,
        mastery_streak: int = DEFAULT_MASTERY_STREAK,
    ) -> MasteryLevel:
        """
        Convert a consecutive-correct counter to a level.

        Args:
            streak: Current chain of consecutive correct answers
            total_attempts: Answers recorded so far (0 means never practiced)
            mastery_streak: Chain length that counts as mastered

        Returns:
            Corresponding MasteryLevel
        """
        if streak >= mastery_streak:
            return cls.MASTERED
        if total_attempts == 0:
            return cls.NEW
        if streak >= 3:
            return cls.GOOD
        if streak >= 1:
            return cls.LEARNING
        return cls.DIFFICULT

    @classmethod
    def from_success_rate(cls, rate: float, attempts: int, min_attempts: int) -> MasteryLevel:
        """Convert a 0-100 success rate to a level once enough attempts exist."""
        if attempts < min_attempts:
            return cls.NEW
        if rate >= 90:
            return cls.MASTERED
        if rate >= 70:
            return cls.GOOD
        if rate >= 50:
            return cls.LEARNING
        return cls.DIFFICULT

    @property
    def rank(self) -> int:
        """Position in the weakest-to-strongest ordering."""
        return list(MasteryLevel).index(self)

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value

    @property
    def emoji(self) -> str:
        """Status glyph for CLI display."""
        return {
            MasteryLevel.NEW: "○",
            MasteryLevel.DIFFICULT: "◔",
            MasteryLevel.LEARNING: "◑",
            MasteryLevel.GOOD: "◕",
            MasteryLevel.MASTERED: "●",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            MasteryLevel.NEW: "dim",
            MasteryLevel.DIFFICULT: "red",
            MasteryLevel.LEARNING: "yellow",
            MasteryLevel.GOOD: "cyan",
            MasteryLevel.MASTERED: "green",
        }[self]
