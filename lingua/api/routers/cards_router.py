"""
Cards router.

CRUD, filtering, statistics, duplicates and import/export for cards.
Cards are returned in their camelCase dictionary form.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from config import get_settings
from lingua.api.dependencies import get_user_id, http_error
from lingua.core.card import IconModel
from lingua.core.errors import LinguaError
from lingua.core.words import word_data_from_dict
from lingua.db.database import get_session
from lingua.duplicates.detector import DuplicateDetectionConfig, DuplicateDetector
from lingua.services.card_service import CardFilter, CardService

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class IconPayload(BaseModel):
    """Iconify icon id ("set:name") and optional collection name."""

    id: str
    category: str | None = None

    def to_model(self) -> IconModel:
        return IconModel.from_iconify(self.id, self.category)


class CardCreateRequest(BaseModel):
    """Model for a new card."""

    front_text: str
    back_text: str
    language: str
    category: str
    icon: IconPayload | None = None
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    notes: str | None = None
    word_data: dict[str, Any] | None = None
    difficulty: int = 1
    german_article: str | None = None
    reject_exact_duplicates: bool = False


class CardUpdateRequest(BaseModel):
    """Partial card update; omitted fields are unchanged."""

    front_text: str | None = None
    back_text: str | None = None
    language: str | None = None
    category: str | None = None
    icon: IconPayload | None = None
    tags: list[str] | None = None
    examples: list[str] | None = None
    notes: str | None = None
    word_data: dict[str, Any] | None = None
    difficulty: int | None = None
    german_article: str | None = None
    is_favorite: bool | None = None
    is_archived: bool | None = None


class CardCreateResponse(BaseModel):
    card: dict[str, Any]
    duplicates: list[dict[str, Any]]


class ImportResponse(BaseModel):
    imported: int
    skipped: int
    errors: list[str]


def _service(session: Session, user_id: str) -> CardService:
    return CardService(session, user_id, policy=get_settings().get_scheduling_policy())


# ========================================
# Card Endpoints
# ========================================


@router.get("", summary="List cards")
def list_cards(
    search: str = "",
    category: str | None = None,
    language: str | None = None,
    tags: list[str] = Query(default=[]),
    due: bool = False,
    favorites: bool = False,
    include_archived: bool = False,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> list[dict[str, Any]]:
    """List cards matching every given filter, newest first."""
    criteria = CardFilter(
        search=search,
        category=category,
        language=language,
        tags=tags,
        due_only=due,
        favorites_only=favorites,
        include_archived=include_archived,
    )
    return [card.to_dict() for card in _service(session, user_id).filtered_cards(criteria)]


@router.post("", status_code=201, response_model=CardCreateResponse, summary="Create a card")
def create_card(
    request: CardCreateRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> CardCreateResponse:
    """Create a card; likely duplicates are reported alongside it."""
    try:
        creation = _service(session, user_id).create_card(
            front_text=request.front_text,
            back_text=request.back_text,
            language=request.language,
            category=request.category,
            icon=request.icon.to_model() if request.icon else None,
            tags=request.tags,
            examples=request.examples,
            notes=request.notes,
            word_data=word_data_from_dict(request.word_data),
            difficulty=request.difficulty,
            german_article=request.german_article,
            reject_exact_duplicates=request.reject_exact_duplicates,
        )
    except LinguaError as e:
        raise http_error(e) from e
    return CardCreateResponse(
        card=creation.card.to_dict(),
        duplicates=[
            {
                "cardId": match.duplicate_card.id,
                "frontText": match.duplicate_card.front_text,
                "backText": match.duplicate_card.back_text,
                "similarity": match.similarity_score,
                "strategy": match.strategy.value,
                "reason": match.reason,
            }
            for match in creation.duplicates
        ],
    )


@router.get("/stats", summary="Deck statistics")
def card_statistics(
    language: str | None = None,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    stats = _service(session, user_id).statistics(language)
    return {
        "total": stats.total,
        "active": stats.active,
        "archived": stats.archived,
        "favorites": stats.favorites,
        "due": stats.due,
        "byLanguage": stats.by_language,
        "categories": stats.categories,
        "tags": stats.tags,
        "averageSuccessRate": stats.average_success_rate,
        "mastery": stats.mastery,
    }


@router.get("/duplicates", summary="Find likely duplicates")
def find_duplicates(
    preset: str = "standard",
    language: str | None = None,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, list[dict[str, Any]]]:
    """Map of card id to its likely duplicates."""
    try:
        config = DuplicateDetectionConfig.preset(preset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    service = _service(session, user_id)
    service.detector = DuplicateDetector(config)
    return {
        card_id: [
            {
                "cardId": m.duplicate_card.id,
                "similarity": m.similarity_score,
                "strategy": m.strategy.value,
                "reason": m.reason,
            }
            for m in matches
        ]
        for card_id, matches in service.find_duplicates(language).items()
    }


@router.get("/export", summary="Export cards")
def export_cards(
    language: str | None = None,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> list[dict[str, Any]]:
    return _service(session, user_id).export_cards(language)


@router.post("/import", response_model=ImportResponse, summary="Import cards")
def import_cards(
    rows: list[dict[str, Any]],
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> ImportResponse:
    """Import exported cards or simple rows; invalid rows are skipped."""
    try:
        result = _service(session, user_id).import_cards(rows)
    except LinguaError as e:
        raise http_error(e) from e
    logger.info(f"API import: {result.imported} imported, {result.skipped} skipped")
    return ImportResponse(imported=result.imported, skipped=result.skipped, errors=result.errors)


@router.get("/{card_id}", summary="Get a card")
def get_card(
    card_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    try:
        return _service(session, user_id).get_card(card_id).to_dict()
    except LinguaError as e:
        raise http_error(e) from e


@router.patch("/{card_id}", summary="Update a card")
def update_card(
    card_id: str,
    request: CardUpdateRequest,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    changes = request.model_dump(exclude_unset=True)
    if "icon" in changes:
        changes["icon"] = request.icon.to_model() if request.icon else None
    if "word_data" in changes:
        changes["word_data"] = word_data_from_dict(request.word_data)
    try:
        return _service(session, user_id).update_card(card_id, **changes).to_dict()
    except LinguaError as e:
        raise http_error(e) from e


@router.delete("/{card_id}", status_code=204, summary="Delete a card")
def delete_card(
    card_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> None:
    try:
        _service(session, user_id).delete_card(card_id)
    except LinguaError as e:
        raise http_error(e) from e


@router.post("/{card_id}/duplicate", status_code=201, summary="Copy a card")
def duplicate_card(
    card_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    try:
        return _service(session, user_id).duplicate_card(card_id).to_dict()
    except LinguaError as e:
        raise http_error(e) from e


@router.post("/{card_id}/favorite", summary="Toggle favorite")
def toggle_favorite(
    card_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    try:
        return _service(session, user_id).toggle_favorite(card_id).to_dict()
    except LinguaError as e:
        raise http_error(e) from e


@router.post("/{card_id}/archive", summary="Toggle archived")
def toggle_archive(
    card_id: str,
    session: Session = Depends(get_session),
    user_id: str = Depends(get_user_id),
) -> dict[str, Any]:
    try:
        return _service(session, user_id).toggle_archive(card_id).to_dict()
    except LinguaError as e:
        raise http_error(e) from e
