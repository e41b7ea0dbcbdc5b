"""Analyzer engine: orchestrates one analysis run end to end."""

from repoprofiler.engines.analyzer.aggregator import build_profile
from repoprofiler.engines.analyzer.analyzer import RepositoryAnalyzer, analyze

__all__ = ["RepositoryAnalyzer", "analyze", "build_profile"]
