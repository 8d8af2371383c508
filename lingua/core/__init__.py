"""
Core Module - Domain model for language-learning flashcards.

Components:
- exercise_type: Exercise types and categories, usability per card
- scoring: Per-exercise scores and the interval growth policy
- mastery: Mastery levels derived from streaks or success rates
- card / words: Cards, icons and grammatical word data
- streak: Daily learning streaks and milestones
- preferences: Which exercise types a learner practices
- rate_limit: Sliding-window limits for card operations

Everything here is pure: no database, network or settings access.
Time-dependent operations take an optional `now`.
"""

from lingua.core.card import CardAnswer, CardModel, IconModel
from lingua.core.errors import (
    AiNotConfiguredError,
    AiProviderError,
    CardNotFoundError,
    CardValidationError,
    EnrichmentParseError,
    IconSearchError,
    LinguaError,
    RateLimitExceeded,
)
from lingua.core.exercise_type import ExerciseCategory, ExerciseType
from lingua.core.mastery import MasteryLevel
from lingua.core.preferences import ExercisePreferences
from lingua.core.rate_limit import RateLimitConfig, RateLimiter
from lingua.core.scoring import DEFAULT_POLICY, ExerciseScore, SchedulingPolicy
from lingua.core.streak import STREAK_MILESTONES, StreakModel
from lingua.core.words import (
    AdjectiveData,
    AdverbData,
    NounData,
    VerbData,
    WordData,
    WordType,
    word_data_from_dict,
)

__all__ = [
    # Cards
    "CardAnswer",
    "CardModel",
    "IconModel",
    "WordType",
    "WordData",
    "VerbData",
    "NounData",
    "AdjectiveData",
    "AdverbData",
    "word_data_from_dict",
    # Exercises and scoring
    "ExerciseCategory",
    "ExerciseType",
    "ExerciseScore",
    "SchedulingPolicy",
    "DEFAULT_POLICY",
    "MasteryLevel",
    "ExercisePreferences",
    # Streaks
    "StreakModel",
    "STREAK_MILESTONES",
    # Rate limiting
    "RateLimitConfig",
    "RateLimiter",
    # Errors
    "LinguaError",
    "CardValidationError",
    "CardNotFoundError",
    "RateLimitExceeded",
    "IconSearchError",
    "AiProviderError",
    "AiNotConfiguredError",
    "EnrichmentParseError",
]
