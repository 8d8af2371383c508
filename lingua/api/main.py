"""
FastAPI application for lingua-cards.

Provides REST API for:
- Card management, statistics and import/export
- Practice queues and answer recording
- Daily streaks
- Icon search
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from lingua import __version__
from lingua.api.routers import cards_router, icons_router, practice_router, streak_router
from lingua.db import database

settings = get_settings()


def _check_database_health() -> tuple[str, str | None]:
    """
    Check database connectivity.

    Returns:
        Tuple of (status, error_message). Status is "ok" or "error".
    """
    try:
        with database.get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok", None
    except SQLAlchemyError as e:
        return "error", str(e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting lingua-cards API...")
    database.init_db()
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    logger.info("Shutting down lingua-cards API...")


app = FastAPI(
    title="lingua-cards",
    description="Language-learning flashcards with per-exercise spaced repetition.",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {"service": "lingua-cards", "version": __version__, "status": "ok"}


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with a database connectivity test."""
    db_status, db_error = _check_database_health()
    result: dict[str, Any] = {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "components": {
            "database": db_status,
            "ai": "configured" if settings.has_ai_configured() else "not_configured",
        },
    }
    if db_error:
        result["errors"] = {"database": db_error}
    return result


app.include_router(cards_router.router, prefix="/api/cards", tags=["Cards"])
app.include_router(practice_router.router, prefix="/api/practice", tags=["Practice"])
app.include_router(streak_router.router, prefix="/api/streak", tags=["Streak"])
app.include_router(icons_router.router, prefix="/api/icons", tags=["Icons"])
