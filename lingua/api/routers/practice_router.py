"""
Practice router.

Stateless practice flow for API clients:
1. GET  /queue     - prepared exercises for the due cards
2. POST /answer    - grade a response and record the result on the card
3. POST /complete  - record the finished session on the streak
"""

from __future__ import annotations

import random
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config import get_settings
from lingua.api.dependencies import get_user_id, http_error
from lingua.core.errors import LinguaError
from lingua.core.exercise_type import ExerciseType
from lingua.core.preferences import ExercisePreferences
from lingua.db.database import get_session
from lingua.review.exercises import PreparedExercise, check_answer, prepare_exercise
from lingua.review.filters import has_enough_for_multiple_choice
from lingua.review.practice_session import PracticeSession
from lingua.services.card_service import CardService
from lingua.services.preferences_service import PreferencesService
from lingua.services.streak_service import StreakService

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class ExerciseItem(BaseModel):
    """One prepared exercise in the practice queue."""

    card_id: str
    exercise_type: str
    display_name: str
    prompt: str
    expected_answer: str
    options: list[str] = Field(default_factory=list)
    scrambled_words: list[str] = Field(default_factory=list)
    form_label: str | None = None
    self_graded: bool = False


class AnswerRequest(BaseModel):
    card_id: str
    exercise_type: str
    response: str | list[str] = ""
    form_label: str | None = None  # conjugation: the form that was asked
    marked_correct: bool | None = None  # required for self-graded exercises


class AnswerResponse(BaseModel):
    correct: bool
    expected_answer: str
    card: dict[str, Any]


class CompleteRequest(BaseModel):
    cards_reviewed: int = Field(gt=0)


def _to_item(prepared: PreparedExercise) -> ExerciseItem:
    return ExerciseItem(
        card_id=prepared.card_id,
        exercise_type=prepared.exercise_type.value,
        display_name=prepared.exercise_type.display_name,
        prompt=prepared.prompt,
        expected_answer=prepared.expected_answer,
        options=prepared.options,
        scrambled_words=prepared.scrambled_words,
        form_label=prepared.form_label,
        self_graded=prepared.is_self_graded,
    )


# ========================================
# Practice Endpoints
# ========================================


@router.get("/queue", response_model=list[ExerciseItem], summary="Build a practice queue")
def practice_queue(
    language: str | None = None,
    limit: int = 20,
    seed: int | None = None,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> list[ExerciseItem]:
    """
    Prepared exercises for due cards, ordered by the learner's preferences.

    Pass `seed` for a reproducible order and option shuffle.
    """
    settings = get_settings()
    cards = CardService(session, user_id).all_cards()
    practice = PracticeSession(
        cards=cards,
        preferences=PreferencesService(session, user_id).load_preferences(),
        language=settings.active_language if language is None else language,
        rng=random.Random(seed),
        min_cards_for_multiple_choice=settings.min_cards_for_multiple_choice,
    )
    if not practice.start():
        return []
    rng = random.Random(seed)
    return [
        _to_item(prepare_exercise(item.card, item.exercise_type, cards, rng))
        for item in practice.queue[:limit]
    ]


@router.post("/answer", response_model=AnswerResponse, summary="Grade and record an answer")
def submit_answer(
    request: AnswerRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> AnswerResponse:
    exercise_type = ExerciseType.from_value(request.exercise_type)
    if exercise_type is None or not exercise_type.is_implemented:
        raise HTTPException(status_code=422, detail=f"Unknown exercise type: {request.exercise_type}")

    settings = get_settings()
    service = CardService(session, user_id, policy=settings.get_scheduling_policy())
    try:
        card = service.get_card(request.card_id)
    except LinguaError as e:
        raise http_error(e) from e

    deck = service.all_cards(card.language)
    enough = has_enough_for_multiple_choice(deck, settings.min_cards_for_multiple_choice, card.language)
    if not exercise_type.can_use(card, enough):
        raise HTTPException(
            status_code=422,
            detail=f"{exercise_type.display_name} is not available for this card",
        )

    prepared = prepare_exercise(card, exercise_type, deck)
    if exercise_type is ExerciseType.CONJUGATION_PRACTICE and request.form_label:
        forms = card.word_data.inflected_forms() if card.word_data else {}
        if request.form_label in forms:
            prepared.form_label = request.form_label
            prepared.expected_answer = forms[request.form_label]

    verdict = request.marked_correct
    if verdict is None:
        verdict = check_answer(prepared, request.response)
    if verdict is None:
        raise HTTPException(status_code=422, detail="Self-graded exercise requires marked_correct")

    updated = service.record_exercise_result(card.id, exercise_type, verdict)
    return AnswerResponse(correct=verdict, expected_answer=prepared.expected_answer, card=updated.to_dict())


@router.post("/complete", summary="Record a finished session")
def complete_session(
    request: CompleteRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    update = StreakService(session, user_id).record_session(request.cards_reviewed)
    return {"streak": update.streak.to_dict(), "newMilestones": update.new_milestones}


@router.get("/preferences", summary="Get exercise preferences")
def get_preferences(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    return PreferencesService(session, user_id).load_preferences().to_dict()


@router.put("/preferences", summary="Replace exercise preferences")
def put_preferences(
    payload: dict[str, Any],
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    """Accepts the enabledTypes / prioritizeWeaknesses / weaknessThreshold form."""
    service = PreferencesService(session, user_id)
    return service.save_preferences(ExercisePreferences.from_dict(payload)).to_dict()
