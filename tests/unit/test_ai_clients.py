"""
Unit tests for AI provider clients.
"""

import pytest
import pytest_asyncio
from httpx import ConnectError, Request, Response

from lingua.core.errors import AiNotConfiguredError, AiProviderError
from lingua.integrations.ai_clients import (
    AiConfig,
    AiProvider,
    AiService,
    AnthropicClient,
    GeminiClient,
    OpenAiClient,
    OpenRouterClient,
    create_client,
)


def respond(payload, status=200):
    """Build a mock client.post returning a fixed response and recording the call."""
    calls = []

    async def mock_post(url, **kwargs):
        calls.append({"url": url, **kwargs})
        return Response(status, json=payload, request=Request("POST", url))

    return mock_post, calls


@pytest_asyncio.fixture
async def openai_client():
    client = OpenAiClient()
    yield client
    await client.close()


class TestAiConfig:
    def test_defaults(self):
        config = AiConfig()

        assert config.provider is AiProvider.GEMINI
        assert not config.is_configured
        assert config.effective_model == "gemini-2.5-flash-lite"

    def test_explicit_model(self):
        config = AiConfig(provider=AiProvider.OPENAI, api_key="sk-test", model="gpt-4o")

        assert config.is_configured
        assert config.effective_model == "gpt-4o"

    def test_provider_metadata(self):
        assert AiProvider.OPENROUTER.display_name == "OpenRouter"
        assert AiProvider.ANTHROPIC.base_url == "https://api.anthropic.com/v1"
        assert AiProvider.OPENAI.default_model in AiProvider.OPENAI.available_models


class TestProviderRequests:
    """Each provider sends its own request shape and parses its own reply."""

    @pytest.mark.asyncio
    async def test_openai_chat_completion(self, openai_client, monkeypatch):
        mock_post, calls = respond({"choices": [{"message": {"content": "Hallo"}}]})
        monkeypatch.setattr(openai_client.client, "post", mock_post)

        reply = await openai_client.complete("Say hi", "sk-test")

        assert reply == "Hallo"
        [call] = calls
        assert call["url"] == "https://api.openai.com/v1/chat/completions"
        assert call["headers"] == {"Authorization": "Bearer sk-test"}
        assert call["json"]["model"] == "gpt-4o-mini"
        assert call["json"]["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_openrouter_uses_own_base_url(self, monkeypatch):
        client = OpenRouterClient()
        mock_post, calls = respond({"choices": [{"message": {"content": "ok"}}]})
        monkeypatch.setattr(client.client, "post", mock_post)

        await client.complete("prompt", "key", model="openai/gpt-4o")
        await client.close()

        assert calls[0]["url"] == "https://openrouter.ai/api/v1/chat/completions"
        assert calls[0]["json"]["model"] == "openai/gpt-4o"

    @pytest.mark.asyncio
    async def test_anthropic_messages(self, monkeypatch):
        client = AnthropicClient()
        mock_post, calls = respond({"content": [{"type": "text", "text": "Guten Tag"}]})
        monkeypatch.setattr(client.client, "post", mock_post)

        reply = await client.complete("prompt", "ak-test")
        await client.close()

        assert reply == "Guten Tag"
        assert calls[0]["url"] == "https://api.anthropic.com/v1/messages"
        assert calls[0]["headers"]["x-api-key"] == "ak-test"
        assert calls[0]["headers"]["anthropic-version"] == "2023-06-01"

    @pytest.mark.asyncio
    async def test_gemini_generate_content(self, monkeypatch):
        client = GeminiClient()
        mock_post, calls = respond({"candidates": [{"content": {"parts": [{"text": "Servus"}]}}]})
        monkeypatch.setattr(client.client, "post", mock_post)

        reply = await client.complete("prompt", "g-key")
        await client.close()

        assert reply == "Servus"
        assert calls[0]["url"].endswith("/models/gemini-2.5-flash-lite:generateContent?key=g-key")
        assert calls[0]["json"]["contents"][0]["parts"][0]["text"] == "prompt"


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, message",
        [
            (401, "Invalid API key"),
            (429, "Rate limit exceeded"),
            (503, "temporarily unavailable"),
            (418, "API error: 418"),
        ],
    )
    async def test_status_messages(self, openai_client, monkeypatch, status, message):
        mock_post, _ = respond({"error": "nope"}, status=status)
        monkeypatch.setattr(openai_client.client, "post", mock_post)

        with pytest.raises(AiProviderError, match=message) as exc_info:
            await openai_client.complete("prompt", "sk-test")
        assert "nope" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_unexpected_shape(self, openai_client, monkeypatch):
        mock_post, _ = respond({"choices": []})
        monkeypatch.setattr(openai_client.client, "post", mock_post)

        with pytest.raises(AiProviderError, match="Unexpected response"):
            await openai_client.complete("prompt", "sk-test")

    @pytest.mark.asyncio
    async def test_connection_error(self, openai_client, monkeypatch):
        async def mock_post(url, **kwargs):
            raise ConnectError("Connection refused")

        monkeypatch.setattr(openai_client.client, "post", mock_post)

        with pytest.raises(AiProviderError, match="Could not reach"):
            await openai_client.complete("prompt", "sk-test")


class TestAiService:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        async with AiService() as service:
            with pytest.raises(AiNotConfiguredError):
                await service.complete("prompt", AiConfig())

    @pytest.mark.asyncio
    async def test_routes_to_configured_provider(self, monkeypatch):
        async with AiService() as service:
            client = service.get_client(AiProvider.ANTHROPIC)
            mock_post, calls = respond({"content": [{"text": "ja"}]})
            monkeypatch.setattr(client.client, "post", mock_post)

            config = AiConfig(provider=AiProvider.ANTHROPIC, api_key="ak", model="claude-3-opus-latest")
            assert await service.complete("prompt", config) == "ja"
            assert service.get_client(AiProvider.ANTHROPIC) is client

        assert calls[0]["json"]["model"] == "claude-3-opus-latest"

    def test_create_client_per_provider(self):
        assert isinstance(create_client(AiProvider.OPENROUTER), OpenRouterClient)
        assert isinstance(create_client(AiProvider.GEMINI), GeminiClient)
