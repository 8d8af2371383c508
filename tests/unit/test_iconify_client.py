"""
Unit tests for the Iconify API client.
"""

import pytest
import pytest_asyncio
from httpx import ConnectError, Request, Response, TimeoutException

from lingua.core.errors import IconSearchError
from lingua.integrations import iconify_client
from lingua.integrations.iconify_client import IconifyClient


@pytest.fixture
def search_result():
    """Sample Iconify search response."""
    return {
        "icons": ["mdi:dog", "fluent-emoji:dog-face", "plain"],
        "total": 3,
        "collections": {
            "mdi": {"name": "Material Design Icons"},
            "fluent-emoji": {"name": "Fluent Emoji"},
        },
    }


@pytest_asyncio.fixture
async def client(monkeypatch):
    """Iconify client with retry backoff disabled."""

    async def no_sleep(seconds):
        return None

    monkeypatch.setattr(iconify_client.asyncio, "sleep", no_sleep)
    client = IconifyClient(base_url="https://icons.test/", retry_attempts=3)
    yield client
    await client.close()


class TestSearchIcons:
    """Tests for IconifyClient.search_icons."""

    @pytest.mark.asyncio
    async def test_maps_ids_to_icons(self, client, search_result, monkeypatch):
        """Icon ids become IconModels labelled with their collection name."""
        captured = {}

        async def mock_get(url, **kwargs):
            captured["url"] = url
            captured["params"] = kwargs.get("params")
            return Response(200, json=search_result, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)

        icons = await client.search_icons("  dog ", limit=5)

        assert captured["url"] == "https://icons.test/search"
        assert captured["params"] == {"query": "dog", "limit": 5}
        assert [icon.id for icon in icons] == ["mdi:dog", "fluent-emoji:dog-face", "plain"]
        assert icons[0].category == "Material Design Icons"
        assert icons[1].name == "dog face"
        assert icons[2].set == "unknown"

    @pytest.mark.asyncio
    async def test_default_limit(self, client, monkeypatch):
        captured = {}

        async def mock_get(url, **kwargs):
            captured["params"] = kwargs.get("params")
            return Response(200, json={"icons": []}, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)

        assert await client.search_icons("house") == []
        assert captured["params"]["limit"] == 999

    @pytest.mark.asyncio
    async def test_blank_query_skips_request(self, client, monkeypatch):
        async def mock_get(url, **kwargs):
            raise AssertionError("no request expected")

        monkeypatch.setattr(client.client, "get", mock_get)

        assert await client.search_icons("   ") == []


class TestRetries:
    """Retry behaviour for transient and permanent failures."""

    @pytest.mark.asyncio
    async def test_timeout_then_success(self, client, search_result, monkeypatch):
        call_count = 0

        async def mock_get(url, **kwargs):
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise TimeoutException("Timeout")
            return Response(200, json=search_result, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)

        icons = await client.search_icons("dog")

        assert call_count == 2
        assert len(icons) == 3

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, client, search_result, monkeypatch):
        call_count = 0

        async def mock_get(url, **kwargs):
            nonlocal call_count
            call_count += 1
            status = 503 if call_count == 1 else 200
            return Response(status, json=search_result, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)

        await client.search_icons("dog")
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, client, monkeypatch):
        call_count = 0

        async def mock_get(url, **kwargs):
            nonlocal call_count
            call_count += 1
            return Response(404, json={"error": "not found"}, request=Request("GET", url))

        monkeypatch.setattr(client.client, "get", mock_get)

        with pytest.raises(IconSearchError, match="404"):
            await client.search_icons("dog")
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_all_retries_exhausted(self, client, monkeypatch):
        call_count = 0

        async def mock_get(url, **kwargs):
            nonlocal call_count
            call_count += 1
            raise ConnectError("Connection refused")

        monkeypatch.setattr(client.client, "get", mock_get)

        with pytest.raises(IconSearchError):
            await client.search_icons("dog")
        assert call_count == 3
