"""
Exercise preferences: which exercise types a learner practices.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from lingua.core.exercise_type import ExerciseCategory, ExerciseType

if TYPE_CHECKING:
    from lingua.core.card import CardModel

DEFAULT_WEAKNESS_THRESHOLD = 70.0


def _all_implemented() -> frozenset[ExerciseType]:
    return frozenset(ExerciseType.implemented())


@dataclass(frozen=True)
class ExercisePreferences:
    """User preferences for exercise type selection."""

    enabled_types: frozenset[ExerciseType] = field(default_factory=_all_implemented)
    prioritize_weaknesses: bool = True
    weakness_threshold: float = DEFAULT_WEAKNESS_THRESHOLD  # success rate (%) below which a type is weak

    @classmethod
    def defaults(cls) -> ExercisePreferences:
        """All implemented types enabled."""
        return cls()

    def is_enabled(self, exercise_type: ExerciseType) -> bool:
        return exercise_type in self.enabled_types

    @property
    def has_any_enabled(self) -> bool:
        return bool(self.enabled_types)

    @property
    def enabled_count(self) -> int:
        return len(self.enabled_types)

    def ordered_enabled_types(self) -> list[ExerciseType]:
        """Enabled types in declaration order."""
        return [t for t in ExerciseType if t in self.enabled_types]

    def is_category_fully_enabled(self, category: ExerciseCategory) -> bool:
        return all(t in self.enabled_types for t in category.exercise_types)

    def is_category_partially_enabled(self, category: ExerciseCategory) -> bool:
        types = category.exercise_types
        enabled = sum(1 for t in types if t in self.enabled_types)
        return 0 < enabled < len(types)

    def weak_types(self, card: CardModel) -> list[ExerciseType]:
        """Enabled types practiced on the card with a success rate below the threshold."""
        weak = []
        for exercise_type in self.ordered_enabled_types():
            score = card.exercise_score(exercise_type)
            if score and score.total_attempts > 0 and score.success_rate < self.weakness_threshold:
                weak.append(exercise_type)
        return weak

    # ------------------------------------------------------------------
    # Copy-on-write updates
    # ------------------------------------------------------------------

    def toggle_type(self, exercise_type: ExerciseType) -> ExercisePreferences:
        return replace(self, enabled_types=self.enabled_types ^ {exercise_type})

    def toggle_category(self, category: ExerciseCategory, enabled: bool) -> ExercisePreferences:
        types = set(category.exercise_types)
        if enabled:
            return replace(self, enabled_types=self.enabled_types | types)
        return replace(self, enabled_types=self.enabled_types - types)

    def enable_all(self) -> ExercisePreferences:
        return replace(self, enabled_types=_all_implemented())

    def disable_all(self) -> ExercisePreferences:
        return replace(self, enabled_types=frozenset())

    def with_changes(self, **changes: Any) -> ExercisePreferences:
        return replace(self, **changes)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabledTypes": [t.value for t in self.ordered_enabled_types()],
            "prioritizeWeaknesses": self.prioritize_weaknesses,
            "weaknessThreshold": self.weakness_threshold,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExercisePreferences:
        """Parse preferences; unknown or unimplemented type names are ignored."""
        enabled = set()
        for name in data.get("enabledTypes") or []:
            exercise_type = ExerciseType.from_value(str(name))
            if exercise_type is not None and exercise_type.is_implemented:
                enabled.add(exercise_type)
        return cls(
            enabled_types=frozenset(enabled),
            prioritize_weaknesses=bool(data.get("prioritizeWeaknesses", True)),
            weakness_threshold=float(data.get("weaknessThreshold", DEFAULT_WEAKNESS_THRESHOLD)),
        )
