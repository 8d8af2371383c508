"""
Integrations Module - HTTP clients for external services.

Components:
- iconify_client: Iconify icon search
- ai_clients: OpenAI, Anthropic, OpenRouter and Gemini completion clients
"""

from lingua.integrations.ai_clients import (
    AiConfig,
    AiProvider,
    AiProviderClient,
    AiService,
    AnthropicClient,
    GeminiClient,
    OpenAiClient,
    OpenRouterClient,
    create_client,
)
from lingua.integrations.iconify_client import IconifyClient

__all__ = [
    "AiConfig",
    "AiProvider",
    "AiProviderClient",
    "AiService",
    "AnthropicClient",
    "GeminiClient",
    "IconifyClient",
    "OpenAiClient",
    "OpenRouterClient",
    "create_client",
]
