"""
Icons router.

Proxies Iconify search so clients can attach icons to cards.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from config import get_settings
from lingua.api.dependencies import http_error
from lingua.core.errors import IconSearchError
from lingua.integrations.iconify_client import IconifyClient

router = APIRouter()


@router.get("/search", summary="Search icons")
async def search_icons(
    query: str,
    limit: int = Query(default=50, ge=1, le=999),
) -> list[dict[str, Any]]:
    settings = get_settings()
    try:
        async with IconifyClient(base_url=settings.iconify_base_url) as client:
            icons = await client.search_icons(query, limit)
    except IconSearchError as e:
        raise http_error(e) from e
    return [icon.to_dict() for icon in icons]
