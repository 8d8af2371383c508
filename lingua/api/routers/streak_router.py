"""
Streak router.

Read, history and reset endpoints for the daily learning streak.
Sessions are recorded through POST /api/practice/complete.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lingua.api.dependencies import get_user_id
from lingua.db.database import get_session
from lingua.services.streak_service import StreakService

router = APIRouter()


@router.get("", summary="Current streak")
def get_streak(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    service = StreakService(session, user_id)
    return {"streak": service.load().to_dict(), "statistics": service.statistics()}


@router.get("/history", summary="Cards reviewed per day")
def streak_history(
    days: int = Query(default=7, ge=1, le=365),
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> list[dict[str, Any]]:
    """Oldest day first."""
    return [
        {"date": day.isoformat(), "cards": count}
        for day, count in StreakService(session, user_id).daily_review_data(days)
    ]


@router.post("/reset", summary="Reset the current streak")
def reset_streak(
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    return StreakService(session, user_id).reset().to_dict()
