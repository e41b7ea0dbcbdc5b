"""Auxiliary generators: deterministic, no network access."""

from repoprofiler.engines.generators.badges import generate_badges
from repoprofiler.engines.generators.contribution import generate_contribution_guide
from repoprofiler.engines.generators.logo import color_scheme, generate_logo

__all__ = ["color_scheme", "generate_badges", "generate_contribution_guide", "generate_logo"]
