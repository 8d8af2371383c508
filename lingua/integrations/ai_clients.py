"""
AI provider clients for word enrichment.

Supported providers:
- OpenAI and OpenRouter (OpenAI-compatible chat completions)
- Anthropic (messages API)
- Google Gemini (generateContent)

All clients send a single user prompt with a low temperature and return the
reply text. Non-200 responses raise AiProviderError with a user-facing
message; the raw body is kept in `details`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict

from lingua.core.errors import AiNotConfiguredError, AiProviderError

TEMPERATURE = 0.3
MAX_TOKENS = 1000
ANTHROPIC_VERSION = "2023-06-01"

STATUS_MESSAGES = {
    429: "Rate limit exceeded. Please wait a moment and try again.",
    401: "Invalid API key. Please check your credentials.",
    403: "Access denied. Your API key may not have access to this model.",
    404: "Model not found. Please check the model name.",
    500: "AI service temporarily unavailable. Please try again.",
    502: "AI service temporarily unavailable. Please try again.",
    503: "AI service temporarily unavailable. Please try again.",
}


class AiProvider(str, Enum):
    """Supported AI providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return {
            AiProvider.OPENAI: "OpenAI",
            AiProvider.ANTHROPIC: "Anthropic",
            AiProvider.OPENROUTER: "OpenRouter",
            AiProvider.GEMINI: "Google Gemini",
        }[self]

    @property
    def base_url(self) -> str:
        return {
            AiProvider.OPENAI: "https://api.openai.com/v1",
            AiProvider.ANTHROPIC: "https://api.anthropic.com/v1",
            AiProvider.OPENROUTER: "https://openrouter.ai/api/v1",
            AiProvider.GEMINI: "https://generativelanguage.googleapis.com/v1beta",
        }[self]

    @property
    def default_model(self) -> str:
        return self.available_models[0]

    @property
    def available_models(self) -> list[str]:
        """Commonly used models, default first."""
        return {
            AiProvider.OPENAI: ["gpt-4o-mini", "gpt-4o", "gpt-4-turbo", "gpt-3.5-turbo"],
            AiProvider.ANTHROPIC: [
                "claude-3-5-haiku-latest",
                "claude-3-5-sonnet-latest",
                "claude-3-opus-latest",
            ],
            AiProvider.OPENROUTER: [
                "openai/gpt-4o-mini",
                "openai/gpt-4o",
                "anthropic/claude-3.5-sonnet",
                "google/gemini-2.0-flash-exp:free",
                "meta-llama/llama-3.1-8b-instruct:free",
            ],
            AiProvider.GEMINI: [
                "gemini-2.5-flash-lite",
                "gemini-flash-latest",
                "gemini-flash-lite-latest",
                "gemini-2.5-flash",
                "gemini-2.5-pro",
            ],
        }[self]


class AiConfig(BaseModel):
    """Configuration for AI enrichment."""

    model_config = ConfigDict(frozen=True)

    provider: AiProvider = AiProvider.GEMINI
    api_key: str | None = None
    model: str | None = None
    is_enabled: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def effective_model(self) -> str:
        return self.model or self.provider.default_model


# =============================================================================
# Clients
# =============================================================================


class AiProviderClient(ABC):
    """Base class with shared HTTP handling."""

    provider: AiProvider

    def __init__(self, base_url: str | None = None, timeout_seconds: float = 30.0):
        self.base_url = (base_url or self.provider.base_url).rstrip("/")
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))

    @property
    def default_model(self) -> str:
        return self.provider.default_model

    async def close(self) -> None:
        await self.client.aclose()

    async def _post(self, url: str, headers: dict[str, str], body: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.client.post(url, headers=headers, json=body)
        except httpx.RequestError as e:
            logger.error(f"{self.provider.display_name} request failed: {e}")
            raise AiProviderError("Could not reach the AI service. Check your connection.", str(e)) from e

        if response.status_code != 200:
            message = STATUS_MESSAGES.get(response.status_code, f"API error: {response.status_code}")
            logger.warning(f"{self.provider.display_name} returned {response.status_code}")
            raise AiProviderError(message, response.text)
        return response.json()

    async def complete(self, prompt: str, api_key: str, model: str | None = None) -> str:
        """
        Send a prompt and return the reply text.

        Raises:
            AiProviderError: On HTTP failure or an unexpected response shape
        """
        effective_model = model or self.default_model
        logger.debug(f"Sending prompt to {self.provider.display_name} ({effective_model})")
        data = await self._request(prompt, api_key, effective_model)
        try:
            return self.parse_response(data)
        except (KeyError, IndexError, TypeError) as e:
            raise AiProviderError("Unexpected response from the AI service.", str(data)) from e

    @abstractmethod
    async def _request(self, prompt: str, api_key: str, model: str) -> dict[str, Any]:
        ...

    @abstractmethod
    def parse_response(self, data: dict[str, Any]) -> str:
        """Extract the reply text from a provider response."""


class OpenAiCompatibleClient(AiProviderClient):
    """Chat completions API shared by OpenAI and OpenRouter."""

    async def _request(self, prompt: str, api_key: str, model: str) -> dict[str, Any]:
        return await self._post(
            f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {api_key}"},
            body={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": TEMPERATURE,
                "max_tokens": MAX_TOKENS,
            },
        )

    def parse_response(self, data: dict[str, Any]) -> str:
        return data["choices"][0]["message"]["content"]


class OpenAiClient(OpenAiCompatibleClient):
    provider = AiProvider.OPENAI


class OpenRouterClient(OpenAiCompatibleClient):
    provider = AiProvider.OPENROUTER


class AnthropicClient(AiProviderClient):
    provider = AiProvider.ANTHROPIC

    async def _request(self, prompt: str, api_key: str, model: str) -> dict[str, Any]:
        return await self._post(
            f"{self.base_url}/messages",
            headers={"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
            body={
                "model": model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": MAX_TOKENS,
            },
        )

    def parse_response(self, data: dict[str, Any]) -> str:
        return data["content"][0]["text"]


class GeminiClient(AiProviderClient):
    provider = AiProvider.GEMINI

    async def _request(self, prompt: str, api_key: str, model: str) -> dict[str, Any]:
        return await self._post(
            f"{self.base_url}/models/{model}:generateContent?key={api_key}",
            headers={},
            body={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"temperature": TEMPERATURE, "maxOutputTokens": MAX_TOKENS},
            },
        )

    def parse_response(self, data: dict[str, Any]) -> str:
        return data["candidates"][0]["content"]["parts"][0]["text"]


_CLIENT_CLASSES: dict[AiProvider, type[AiProviderClient]] = {
    AiProvider.OPENAI: OpenAiClient,
    AiProvider.ANTHROPIC: AnthropicClient,
    AiProvider.OPENROUTER: OpenRouterClient,
    AiProvider.GEMINI: GeminiClient,
}


def create_client(provider: AiProvider, timeout_seconds: float = 30.0) -> AiProviderClient:
    return _CLIENT_CLASSES[provider](timeout_seconds=timeout_seconds)


class AiService:
    """Completes prompts with whichever provider the config names."""

    def __init__(self, timeout_seconds: float = 30.0):
        self.timeout_seconds = timeout_seconds
        self._clients: dict[AiProvider, AiProviderClient] = {}

    async def __aenter__(self) -> AiService:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def get_client(self, provider: AiProvider) -> AiProviderClient:
        if provider not in self._clients:
            self._clients[provider] = create_client(provider, self.timeout_seconds)
        return self._clients[provider]

    async def complete(self, prompt: str, config: AiConfig) -> str:
        """
        Complete a prompt using the configured provider.

        Raises:
            AiNotConfiguredError: If no API key is set
            AiProviderError: On provider failure
        """
        if not config.is_configured:
            raise AiNotConfiguredError("AI is not configured. Please add your API key.")
        client = self.get_client(config.provider)
        return await client.complete(prompt, config.api_key, config.model)

    async def close(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
