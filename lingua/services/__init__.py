"""
Services Module - Use cases over the repositories.

Components:
- card_service: card CRUD, filtering, statistics, import/export
- streak_service: session recording and streak statistics
- preferences_service: exercise preferences and AI settings
"""

from lingua.services.card_service import (
    CardCreation,
    CardFilter,
    CardService,
    CardStatistics,
    ImportResult,
    default_rate_limiter,
)
from lingua.services.preferences_service import PreferencesService
from lingua.services.streak_service import StreakService, StreakUpdate

__all__ = [
    "CardCreation",
    "CardFilter",
    "CardService",
    "CardStatistics",
    "ImportResult",
    "PreferencesService",
    "StreakService",
    "StreakUpdate",
    "default_rate_limiter",
]
