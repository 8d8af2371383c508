"""
Iconify API client for icon search.

Iconify's public API needs no authentication. Search results come back as
icon ids ("set:name") plus a map of collection metadata; each id is mapped
through IconModel.from_iconify().

Usage:
    async with IconifyClient() as client:
        icons = await client.search_icons("house", limit=20)
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
from loguru import logger

from lingua.core.card import IconModel
from lingua.core.errors import IconSearchError

DEFAULT_BASE_URL = "https://api.iconify.design"
DEFAULT_SEARCH_LIMIT = 999


class IconifyClient:
    """HTTP client for the Iconify search API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        retry_attempts: int = 3,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
    ):
        """
        Initialize Iconify client.

        Args:
            base_url: Base URL for the Iconify API
            timeout_seconds: Request timeout
            retry_attempts: Attempts for timeouts and 5xx responses
            default_limit: Result limit when search_icons() gets none
        """
        self.base_url = base_url.rstrip("/")
        self.retry_attempts = retry_attempts
        self.default_limit = default_limit
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def __aenter__(self) -> IconifyClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET with retry on timeouts and server errors; 4xx fails immediately."""
        url = f"{self.base_url}{path}"
        last_error: Exception | None = None

        for attempt in range(self.retry_attempts):
            try:
                response = await self.client.get(url, params=params)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(f"Iconify timeout on attempt {attempt + 1}/{self.retry_attempts}")

            except httpx.HTTPStatusError as e:
                last_error = e
                status = e.response.status_code
                if status < 500:
                    logger.error(f"Iconify client error: {status}")
                    raise IconSearchError(f"Failed to search icons: {status}") from e
                logger.warning(
                    f"Iconify server error {status} on attempt {attempt + 1}/{self.retry_attempts}"
                )

            except httpx.RequestError as e:
                last_error = e
                logger.warning(f"Iconify request error on attempt {attempt + 1}/{self.retry_attempts}: {e}")

            if attempt < self.retry_attempts - 1:
                await asyncio.sleep(2 ** attempt)

        logger.error(f"Iconify request failed after {self.retry_attempts} attempts: {last_error}")
        raise IconSearchError(f"Error searching icons: {last_error}") from last_error

    async def search_icons(self, query: str, limit: int | None = None) -> list[IconModel]:
        """
        Search icons by keyword.

        Args:
            query: Search term; blank queries return no results without a request
            limit: Maximum results (defaults to the client's default_limit)

        Returns:
            Matching icons in API order

        Raises:
            IconSearchError: On HTTP or connection failure
        """
        if not query.strip():
            return []

        data = await self._get_json(
            "/search",
            params={"query": query.strip(), "limit": limit or self.default_limit},
        )
        icon_ids = data.get("icons") or []
        collections = data.get("collections") or {}

        icons = []
        for icon_id in icon_ids:
            collection_id = icon_id.split(":", 1)[0] if ":" in icon_id else None
            collection = collections.get(collection_id) or {}
            icons.append(IconModel.from_iconify(icon_id, collection.get("name")))

        logger.debug(f"Iconify search '{query}' returned {len(icons)} icons")
        return icons

    async def get_collections(self) -> dict[str, Any]:
        """Available icon collections keyed by prefix."""
        return await self._get_json("/collections")
