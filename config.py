"""
Configuration settings for lingua-cards.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lingua.core.scoring import SchedulingPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///lingua_cards.db",
        description="SQLAlchemy connection string (SQLite or PostgreSQL)",
    )

    # ========================================
    # User & Language
    # ========================================
    user_id: str = Field(
        default="local",
        description="Owner of cards, streak and settings rows",
    )
    active_language: str = Field(
        default="",
        description="Language code to practice (empty for all languages)",
    )
    default_category: str = Field(
        default="vocabulary",
        description="Category assigned to new cards when none is given",
    )

    # ========================================
    # Spaced Repetition
    # ========================================
    scheduling_base_interval_days: int = Field(
        default=3,
        description="Interval after the first correct answer in a chain",
    )
    scheduling_growth_factor: float = Field(
        default=2.0,
        description="Interval multiplier per additional consecutive correct answer",
    )
    scheduling_max_interval_days: int = Field(
        default=180,
        description="Upper bound for any review interval",
    )
    scheduling_relearn_hours: int = Field(
        default=24,
        description="Delay before re-reviewing after an incorrect answer",
    )
    mastery_streak: int = Field(
        default=5,
        description="Consecutive correct answers needed for Mastered",
    )
    min_cards_for_multiple_choice: int = Field(
        default=4,
        description="Deck size needed to build multiple choice options",
    )

    # ========================================
    # AI Integration (word enrichment)
    # ========================================
    ai_provider: Literal["openai", "anthropic", "openrouter", "gemini"] = Field(
        default="gemini",
        description="AI provider used for word enrichment",
    )
    ai_api_key: str | None = Field(
        default=None,
        description="API key for the configured AI provider",
    )
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Generative AI (Gemini) API key",
    )
    ai_model: str | None = Field(
        default=None,
        description="Model override (provider default when unset)",
    )
    ai_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for AI provider requests",
    )

    # ========================================
    # Icon Search
    # ========================================
    iconify_base_url: str = Field(
        default="https://api.iconify.design",
        description="Iconify API base URL",
    )
    icon_search_limit: int = Field(
        default=999,
        description="Default maximum number of icons per search",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default="logs/lingua_cards.log",
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_scheduling_policy(self) -> SchedulingPolicy:
        """Build the scheduling policy from the spaced repetition settings."""
        return SchedulingPolicy(
            base_interval_days=self.scheduling_base_interval_days,
            growth_factor=self.scheduling_growth_factor,
            max_interval_days=self.scheduling_max_interval_days,
            relearn_interval_hours=self.scheduling_relearn_hours,
            mastery_streak=self.mastery_streak,
        )

    def get_ai_api_key(self) -> str | None:
        """Return the AI key, falling back to the Gemini key for the Gemini provider."""
        if self.ai_api_key:
            return self.ai_api_key
        if self.ai_provider == "gemini":
            return self.gemini_api_key
        return None

    def has_ai_configured(self) -> bool:
        """Check if an AI provider key is available."""
        return bool(self.get_ai_api_key())

    def get_ai_config(self) -> dict[str, Any]:
        """Get AI configuration as a dictionary."""
        return {
            "provider": self.ai_provider,
            "api_key": self.get_ai_api_key(),
            "model": self.ai_model,
            "is_enabled": self.has_ai_configured(),
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
