"""
Unit tests for per-exercise scores, interval scheduling and mastery levels.
"""

from datetime import timedelta

import pytest

from lingua.core.exercise_type import ExerciseType
from lingua.core.mastery import MasteryLevel
from lingua.core.scoring import DEFAULT_POLICY, ExerciseScore, SchedulingPolicy


@pytest.fixture
def score():
    return ExerciseScore.initial(ExerciseType.WRITING_TRANSLATION)


class TestSchedulingPolicy:
    """Tests for the geometric, capped interval growth."""

    def test_default_intervals(self):
        days = [DEFAULT_POLICY.interval_for_streak(n).days for n in range(1, 9)]
        assert days == [3, 6, 12, 24, 48, 96, 180, 180]

    def test_intervals_strictly_increase_until_cap(self):
        policy = SchedulingPolicy(base_interval_days=2, growth_factor=1.3, max_interval_days=60)
        intervals = [policy.interval_for_streak(n) for n in range(1, 30)]
        capped = timedelta(days=60)

        for previous, current in zip(intervals, intervals[1:]):
            assert current > previous or current == capped
        assert intervals[-1] == capped

    def test_zero_streak_uses_relearn_interval(self):
        assert DEFAULT_POLICY.interval_for_streak(0) == timedelta(hours=24)

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError):
            SchedulingPolicy(growth_factor=1.0)
        with pytest.raises(ValueError):
            SchedulingPolicy(base_interval_days=10, max_interval_days=5)


class TestExerciseScore:
    """Tests for recording answers on one exercise."""

    def test_initial_score_is_due(self, score, now):
        assert score.total_attempts == 0
        assert score.success_rate == 0.0
        assert score.is_due(now)

    def test_correct_answer_extends_chain(self, score, now):
        updated = score.record_correct(now)

        assert updated.correct_count == 1
        assert updated.current_streak == 1
        assert updated.best_streak == 1
        assert updated.last_practiced == now
        assert updated.next_review == now + timedelta(days=3)
        assert not updated.is_due(now)
        assert updated.is_due(now + timedelta(days=3))

    def test_consecutive_correct_answers_grow_interval(self, score, now):
        updated = score.record_correct(now).record_correct(now).record_correct(now)

        assert updated.current_streak == 3
        assert updated.next_review == now + timedelta(days=12)

    def test_incorrect_answer_breaks_chain(self, score, now):
        updated = score.record_correct(now).record_correct(now).record_incorrect(now)

        assert updated.current_streak == 0
        assert updated.best_streak == 2
        assert updated.incorrect_count == 1
        assert updated.next_review == now + timedelta(hours=24)

    def test_record_is_immutable(self, score, now):
        score.record(True, now)
        assert score.correct_count == 0

    def test_success_rate_and_net_score(self, score, now):
        updated = score.record(True, now).record(True, now).record(False, now)

        assert updated.success_rate == pytest.approx(66.666, rel=1e-3)
        assert updated.net_score == 1

    def test_negative_counters_rejected(self):
        with pytest.raises(ValueError):
            ExerciseScore(type=ExerciseType.WRITING_TRANSLATION, correct_count=-1)

    def test_dict_uses_camel_case(self, score, now):
        data = score.record_correct(now).to_dict()

        assert data["type"] == "writing_translation"
        assert data["currentStreak"] == 1
        assert data["nextReview"].startswith("2025-03-13T12:00:00")
        restored = ExerciseScore.from_dict(data)
        assert restored.next_review == now + timedelta(days=3)

    def test_from_dict_unknown_type(self):
        with pytest.raises(ValueError):
            ExerciseScore.from_dict({"type": "telepathy"})

    def test_from_dict_clamps_negative_counters(self):
        restored = ExerciseScore.from_dict(
            {"type": "writing_translation", "correctCount": -2, "incorrectCount": -1, "currentStreak": -3, "bestStreak": -4}
        )

        assert (restored.correct_count, restored.incorrect_count) == (0, 0)
        assert (restored.current_streak, restored.best_streak) == (0, 0)


class TestMastery:
    """Tests for mastery labels and progress."""

    def test_new_without_attempts(self, score):
        assert score.mastery_level() is MasteryLevel.NEW

    @pytest.mark.parametrize(
        "correct_answers, expected",
        [(1, MasteryLevel.LEARNING), (3, MasteryLevel.GOOD), (5, MasteryLevel.MASTERED)],
    )
    def test_levels_follow_streak(self, score, now, correct_answers, expected):
        for _ in range(correct_answers):
            score = score.record_correct(now)
        assert score.mastery_level() is expected

    def test_difficult_after_miss(self, score, now):
        assert score.record_incorrect(now).mastery_level() is MasteryLevel.DIFFICULT

    def test_progress_and_remaining(self, score, now):
        updated = score.record_correct(now).record_correct(now)

        assert updated.mastery_progress() == pytest.approx(0.4)
        assert updated.answers_to_mastery() == 3
        assert updated.mastery_progress(mastery_streak=2) == 1.0

    def test_from_success_rate_requires_attempts(self):
        assert MasteryLevel.from_success_rate(100.0, 2, 3) is MasteryLevel.NEW
        assert MasteryLevel.from_success_rate(95.0, 3, 3) is MasteryLevel.MASTERED
        assert MasteryLevel.from_success_rate(75.0, 3, 3) is MasteryLevel.GOOD
        assert MasteryLevel.from_success_rate(55.0, 3, 3) is MasteryLevel.LEARNING
        assert MasteryLevel.from_success_rate(10.0, 3, 3) is MasteryLevel.DIFFICULT

    def test_rank_orders_levels(self):
        assert MasteryLevel.NEW.rank < MasteryLevel.DIFFICULT.rank < MasteryLevel.MASTERED.rank
