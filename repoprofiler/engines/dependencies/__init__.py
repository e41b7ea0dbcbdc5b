"""Dependency categorizer: semantic buckets and framework labels."""

from repoprofiler.engines.dependencies.categorizer import (
    CATEGORY_KEYWORDS,
    categorize,
    category_of,
    detect_frameworks,
)

__all__ = ["CATEGORY_KEYWORDS", "categorize", "category_of", "detect_frameworks"]
