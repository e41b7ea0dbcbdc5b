"""Priority sampler: rank paths, pick a bounded subset, fetch it as snippets."""

from repoprofiler.engines.sampler.priority import rank, select_for_inspection
from repoprofiler.engines.sampler.snippets import (
    assess_complexity,
    build_snippet,
    collect_snippets,
    detect_code_features,
    extract_main_function,
)

__all__ = [
    "assess_complexity",
    "build_snippet",
    "collect_snippets",
    "detect_code_features",
    "extract_main_function",
    "rank",
    "select_for_inspection",
]
