"""
Exception types shared across lingua-cards.

Services raise these; the CLI renders them as error messages and the
API maps them onto HTTP status codes.
"""

from __future__ import annotations

from datetime import timedelta


class LinguaError(Exception):
    """Base class for all lingua-cards errors."""
    pass


class CardValidationError(LinguaError, ValueError):
    """Raised when card fields fail validation."""
    pass


class CardNotFoundError(LinguaError, LookupError):
    """Raised when a card id does not exist for the current user."""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class RateLimitExceeded(LinguaError):
    """Raised when an action exceeds its sliding-window limit."""

    def __init__(self, message: str, retry_after: timedelta | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class IconSearchError(LinguaError):
    """Raised when the icon search service fails."""
    pass


class AiProviderError(LinguaError):
    """Raised when an AI provider request fails."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n{self.details}"
        return self.message


class AiNotConfiguredError(LinguaError):
    """Raised when AI enrichment is requested without an API key."""
    pass


class EnrichmentParseError(LinguaError):
    """Raised when an AI reply cannot be parsed into enrichment data."""
    pass
