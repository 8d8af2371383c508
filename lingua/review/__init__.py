"""
Review Module - Practice sessions over due cards.

Components:
- filters: due-card selection and multiple-choice eligibility
- exercises: exercise preparation and answer checking
- practice_session: queue building and session lifecycle
"""

from lingua.review.exercises import PreparedExercise, check_answer, prepare_exercise
from lingua.review.filters import (
    filter_for_practice,
    has_enough_for_multiple_choice,
    wrong_answer_candidates,
)
from lingua.review.practice_session import (
    AnswerState,
    PracticeItem,
    PracticeSession,
    SessionSummary,
    build_practice_queue,
)

__all__ = [
    "AnswerState",
    "PracticeItem",
    "PracticeSession",
    "PreparedExercise",
    "SessionSummary",
    "build_practice_queue",
    "check_answer",
    "filter_for_practice",
    "has_enough_for_multiple_choice",
    "prepare_exercise",
    "wrong_answer_candidates",
]
