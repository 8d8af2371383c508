"""Duplicate card detection."""

from lingua.duplicates.detector import (
    DuplicateDetectionConfig,
    DuplicateDetector,
    DuplicateMatch,
    DuplicateMatchStrategy,
)

__all__ = [
    "DuplicateDetectionConfig",
    "DuplicateDetector",
    "DuplicateMatch",
    "DuplicateMatchStrategy",
]
