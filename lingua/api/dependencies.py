"""Shared router dependencies and error mapping."""

from __future__ import annotations

from fastapi import Header, HTTPException

from config import get_settings
from lingua.core.errors import (
    AiNotConfiguredError,
    AiProviderError,
    CardNotFoundError,
    CardValidationError,
    EnrichmentParseError,
    IconSearchError,
    LinguaError,
    RateLimitExceeded,
)


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """User from the X-User-Id header, else the configured local user."""
    return x_user_id or get_settings().user_id


def http_error(exc: LinguaError) -> HTTPException:
    """Map a domain error onto an HTTP status."""
    if isinstance(exc, CardNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, CardValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, RateLimitExceeded):
        headers = None
        if exc.retry_after is not None:
            headers = {"Retry-After": str(max(1, int(exc.retry_after.total_seconds())))}
        return HTTPException(status_code=429, detail=str(exc), headers=headers)
    if isinstance(exc, AiNotConfiguredError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, (IconSearchError, AiProviderError, EnrichmentParseError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
