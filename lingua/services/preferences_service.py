"""
Per-user exercise preferences and AI settings, stored as JSON user settings.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from config import Settings, get_settings
from lingua.core.preferences import ExercisePreferences
from lingua.db.repositories import SettingsRepository
from lingua.integrations.ai_clients import AiConfig, AiProvider

PREFERENCES_KEY = "exercise_preferences"
AI_CONFIG_KEY = "ai_config"


class PreferencesService:
    def __init__(self, session: Session, user_id: str, settings: Settings | None = None):
        self.repository = SettingsRepository(session, user_id)
        self.settings = settings or get_settings()

    def load_preferences(self) -> ExercisePreferences:
        data = self.repository.get_json(PREFERENCES_KEY)
        if not data:
            return ExercisePreferences.defaults()
        return ExercisePreferences.from_dict(data)

    def save_preferences(self, preferences: ExercisePreferences) -> ExercisePreferences:
        self.repository.set_json(PREFERENCES_KEY, preferences.to_dict())
        logger.debug(f"Saved exercise preferences ({preferences.enabled_count} types enabled)")
        return preferences

    def reset_preferences(self) -> ExercisePreferences:
        self.repository.delete(PREFERENCES_KEY)
        return ExercisePreferences.defaults()

    def load_ai_config(self) -> AiConfig:
        """Stored AI config, falling back to environment settings."""
        stored = self.repository.get_json(AI_CONFIG_KEY)
        if stored:
            return AiConfig.model_validate(stored)
        return AiConfig.model_validate(self.settings.get_ai_config())

    def save_ai_config(self, config: AiConfig) -> AiConfig:
        self.repository.set_json(AI_CONFIG_KEY, config.model_dump(mode="json"))
        logger.info(f"Saved AI config for {config.provider.display_name}")
        return config

    def set_ai_provider(self, provider: AiProvider, api_key: str, model: str | None = None) -> AiConfig:
        return self.save_ai_config(AiConfig(provider=provider, api_key=api_key, model=model, is_enabled=True))
