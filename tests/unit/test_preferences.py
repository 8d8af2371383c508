"""
Unit tests for exercise preferences.
"""

from lingua.core.exercise_type import ExerciseCategory, ExerciseType
from lingua.core.preferences import ExercisePreferences


class TestExercisePreferences:
    def test_defaults_enable_all_implemented(self):
        prefs = ExercisePreferences.defaults()

        assert prefs.enabled_count == len(ExerciseType.implemented())
        assert prefs.prioritize_weaknesses is True
        assert prefs.weakness_threshold == 70.0
        assert not prefs.is_enabled(ExerciseType.SENTENCE_FILL)

    def test_toggle_type_flips(self):
        prefs = ExercisePreferences.defaults().toggle_type(ExerciseType.ARTICLE_SELECTION)
        assert not prefs.is_enabled(ExerciseType.ARTICLE_SELECTION)
        assert prefs.toggle_type(ExerciseType.ARTICLE_SELECTION).is_enabled(ExerciseType.ARTICLE_SELECTION)

    def test_toggle_category(self):
        prefs = ExercisePreferences.defaults().toggle_category(ExerciseCategory.RECOGNITION, False)

        assert not prefs.is_enabled(ExerciseType.READING_RECOGNITION)
        assert prefs.is_enabled(ExerciseType.WRITING_TRANSLATION)
        assert not prefs.is_category_fully_enabled(ExerciseCategory.RECOGNITION)
        assert prefs.is_category_fully_enabled(ExerciseCategory.PRODUCTION)

    def test_partially_enabled_category(self):
        prefs = ExercisePreferences.defaults().toggle_type(ExerciseType.MULTIPLE_CHOICE_ICON)

        assert prefs.is_category_partially_enabled(ExerciseCategory.RECOGNITION)
        assert not prefs.is_category_partially_enabled(ExerciseCategory.PRODUCTION)

    def test_disable_and_enable_all(self):
        prefs = ExercisePreferences.defaults().disable_all()
        assert not prefs.has_any_enabled
        assert prefs.enable_all() == ExercisePreferences.defaults()

    def test_ordered_enabled_types_follow_declaration(self):
        prefs = ExercisePreferences(
            enabled_types=frozenset({ExerciseType.ARTICLE_SELECTION, ExerciseType.READING_RECOGNITION})
        )
        assert prefs.ordered_enabled_types() == [ExerciseType.READING_RECOGNITION, ExerciseType.ARTICLE_SELECTION]

    def test_weak_types(self, make_card, now):
        card = (
            make_card()
            .with_exercise_result(ExerciseType.WRITING_TRANSLATION, False, now)
            .with_exercise_result(ExerciseType.READING_RECOGNITION, True, now)
        )
        assert ExercisePreferences.defaults().weak_types(card) == [ExerciseType.WRITING_TRANSLATION]

    def test_dict_round_trip(self):
        prefs = ExercisePreferences.defaults().toggle_type(ExerciseType.CONJUGATION_PRACTICE).with_changes(
            prioritize_weaknesses=False
        )
        data = prefs.to_dict()

        assert "conjugation_practice" not in data["enabledTypes"]
        assert data["prioritizeWeaknesses"] is False
        assert ExercisePreferences.from_dict(data) == prefs

    def test_from_dict_ignores_unknown_and_unimplemented(self):
        prefs = ExercisePreferences.from_dict(
            {"enabledTypes": ["readingRecognition", "sentence_fill", "telepathy"]}
        )
        assert prefs.enabled_types == frozenset({ExerciseType.READING_RECOGNITION})
