"""API routers for lingua-cards."""

from lingua.api.routers import cards_router, icons_router, practice_router, streak_router

__all__ = [
    "cards_router",
    "practice_router",
    "streak_router",
    "icons_router",
]
