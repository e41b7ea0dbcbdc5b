"""Tables shared by several detectors."""

from __future__ import annotations

# Searched in this order; the first present file is the canonical one.
ENV_EXAMPLE_FILES: tuple[str, ...] = (
    ".env.example",
    ".env.sample",
    ".env.template",
    ".env.local.example",
    ".env.dist",
)
