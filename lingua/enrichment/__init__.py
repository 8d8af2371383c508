"""AI word enrichment for new cards."""

from lingua.enrichment.enricher import (
    WordEnricher,
    WordEnrichmentResult,
    build_prompt,
    clean_json_response,
    parse_response,
)

__all__ = [
    "WordEnricher",
    "WordEnrichmentResult",
    "build_prompt",
    "clean_json_response",
    "parse_response",
]
