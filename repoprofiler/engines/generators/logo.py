"""Project logo synthesis from a language/topic colour table."""

from __future__ import annotations

from collections.abc import Sequence
from xml.sax.saxutils import escape

from repoprofiler.models import ProjectLogo, RepositoryMetadata

# lower-cased language or topic -> (primary, secondary)
COLOR_SCHEMES: dict[str, tuple[str, str]] = {
    "javascript": ("#f7df1e", "#f39c12"),
    "typescript": ("#3178c6", "#2980b9"),
    "python": ("#3776ab", "#2c3e50"),
    "java": ("#ed8b00", "#e67e22"),
    "kotlin": ("#7f52ff", "#6c3fd8"),
    "go": ("#00add8", "#16a085"),
    "rust": ("#ce422b", "#c0392b"),
    "php": ("#777bb4", "#8e44ad"),
    "ruby": ("#cc342d", "#e74c3c"),
    "react": ("#61dafb", "#3498db"),
    "vue": ("#4fc08d", "#27ae60"),
    "angular": ("#dd0031", "#c3002f"),
    "svelte": ("#ff3e00", "#e63900"),
    "nextjs": ("#000000", "#434343"),
}
FRAMEWORK_TOPICS: tuple[str, ...] = ("react", "vue", "angular", "svelte", "nextjs")
DEFAULT_COLORS = ("#3498db", "#2980b9")

LOGO_STYLE = "modern"

_SVG_TEMPLATE = """\
<svg width="64" height="64" viewBox="0 0 64 64" xmlns="http://www.w3.org/2000/svg">
  <defs>
    <linearGradient id="grad" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:{primary};stop-opacity:1" />
      <stop offset="100%" style="stop-color:{secondary};stop-opacity:1" />
    </linearGradient>
  </defs>
  <rect width="64" height="64" rx="12" fill="url(#grad)"/>
  <text x="32" y="42" font-family="Arial, sans-serif" font-size="28" font-weight="bold" text-anchor="middle" fill="white">{letter}</text>
</svg>"""


def color_scheme(language: str | None, topics: Sequence[str]) -> tuple[str, str]:
    """Framework topic first, then language, then the default pair."""
    for topic in topics:
        key = topic.lower()
        if key in FRAMEWORK_TOPICS and key in COLOR_SCHEMES:
            return COLOR_SCHEMES[key]
    return COLOR_SCHEMES.get((language or "").lower(), DEFAULT_COLORS)


def generate_logo(repository: RepositoryMetadata) -> ProjectLogo:
    primary, secondary = color_scheme(repository.language, repository.topics)
    letter = repository.name[:1].upper() or "?"
    return ProjectLogo(
        svg_content=_SVG_TEMPLATE.format(primary=primary, secondary=secondary, letter=escape(letter)),
        primary_color=primary,
        secondary_color=secondary,
        style=LOGO_STYLE,
    )
