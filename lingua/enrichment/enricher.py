"""
AI word enrichment.

Asks an AI provider for the grammatical profile of a word (type,
translation, inflected forms, example sentences, notes) and turns the JSON
reply into card fields.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from lingua.core.errors import EnrichmentParseError
from lingua.core.words import WordData, WordType, word_data_from_dict
from lingua.integrations.ai_clients import AiConfig, AiService

LANGUAGE_NAMES = {
    "de": "German",
    "es": "Spanish",
    "fr": "French",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "ru": "Russian",
    "ja": "Japanese",
    "zh": "Chinese",
    "ko": "Korean",
}

PROMPT_TEMPLATE = """Analyze the {language_name} word "{word}" and provide grammatical information.

Return a JSON object with these fields:
- "wordType": one of "verb", "noun", "adjective", "adverb", "phrase", "other"
- "translation": English translation
- "grammar": object with type-specific fields:
  - For verbs: {{"isRegular": bool, "isSeparable": bool, "separablePrefix": string or null, "auxiliary": "haben" or "sein", "presentSecondPerson": string or null, "presentThirdPerson": string or null, "pastSimple": string or null, "pastParticiple": string}}
  - For nouns: {{"gender": "der"/"die"/"das" for German or "masculine"/"feminine"/"neuter", "plural": string, "genitive": string or null}}
  - For adjectives: {{"comparative": string, "superlative": string}}
  - For adverbs: {{"usageNote": string or null}}
- "examples": array of 2-3 example sentences using the word
- "notes": optional usage notes or tips

Only return valid JSON, no markdown or explanation."""


@dataclass
class WordEnrichmentResult:
    """Grammar data suggested for a word."""

    word_type: WordType
    translation: str | None = None
    word_data: WordData | None = None
    examples: list[str] = field(default_factory=list)
    notes: str | None = None

    @property
    def german_article(self) -> str | None:
        """Article implied by noun gender, if any."""
        return getattr(self.word_data, "article", None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordEnrichmentResult:
        word_type = WordType.parse(data.get("wordType"))
        grammar = data.get("grammar")
        word_data = word_data_from_dict(grammar, word_type) if isinstance(grammar, dict) else None
        examples = [str(e) for e in data.get("examples") or [] if str(e).strip()]
        return cls(
            word_type=word_type,
            translation=data.get("translation"),
            word_data=word_data,
            examples=examples,
            notes=data.get("notes") or None,
        )


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code.lower(), code)


def build_prompt(word: str, language: str) -> str:
    return PROMPT_TEMPLATE.format(language_name=language_name(language), word=word)


def clean_json_response(response: str) -> str:
    """Strip Markdown code fences around a JSON reply."""
    cleaned = response.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_response(response: str) -> WordEnrichmentResult:
    """
    Parse an AI reply into an enrichment result.

    Raises:
        EnrichmentParseError: If the reply is not a JSON object
    """
    cleaned = clean_json_response(response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise EnrichmentParseError(f"Failed to parse AI response: {e}") from e
    if not isinstance(data, dict):
        raise EnrichmentParseError("Failed to parse AI response: expected a JSON object")
    try:
        return WordEnrichmentResult.from_dict(data)
    except (TypeError, ValueError) as e:
        raise EnrichmentParseError(f"Failed to parse AI response: {e}") from e


class WordEnricher:
    """Enriches words with grammar data from the configured AI provider."""

    def __init__(self, config: AiConfig, service: AiService | None = None):
        self.config = config
        self.service = service or AiService()

    async def enrich(self, word: str, language: str) -> WordEnrichmentResult:
        """
        Fetch grammar data for a word.

        Raises:
            AiNotConfiguredError: If no API key is configured
            AiProviderError: On provider failure
            EnrichmentParseError: If the reply cannot be parsed
        """
        logger.info(f"Enriching '{word}' ({language}) via {self.config.provider.display_name}")
        response = await self.service.complete(build_prompt(word, language), self.config)
        result = parse_response(response)
        logger.debug(f"Enriched '{word}' as {result.word_type.value}")
        return result

    async def close(self) -> None:
        await self.service.close()
