"""Path priority rules and bounded top-K selection for content inspection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from repoprofiler.core.config import DEFAULT_SAMPLE_LIMIT
from repoprofiler.models import FileEntry

BASELINE_PRIORITY = 1

# Matched against the lower-cased path in order; first hit wins.
GENERIC_RULES: tuple[tuple[str, int], ...] = (
    ("package.json", 10),
    ("requirements.txt", 10),
    ("pyproject.toml", 10),
    ("pom.xml", 10),
    ("build.gradle", 10),
    ("composer.json", 10),
    ("go.mod", 10),
    ("cargo.toml", 10),
    ("gemfile", 10),
    ("docker-compose.yml", 9),
    ("docker-compose.yaml", 9),
    ("dockerfile", 9),
    (".env.example", 7),
    (".env.sample", 7),
    (".env.template", 7),
)

_JS_RULES: tuple[tuple[str, int], ...] = (
    ("src/main.", 8),
    ("src/index.", 8),
    ("src/app.", 8),
    ("src/server.", 8),
    ("server.js", 8),
    ("server.ts", 8),
    ("app/api/", 7),
    ("pages/api/", 7),
    ("src/routes/", 7),
    ("src/lib/", 6),
    ("src/utils/", 6),
    ("src/core/", 6),
    ("src/api/", 5),
    ("src/components/", 5),
    ("src/ui/", 5),
)

LANGUAGE_RULES: dict[str, tuple[tuple[str, int], ...]] = {
    "javascript": _JS_RULES,
    "typescript": _JS_RULES,
    "python": (
        ("main.py", 8),
        ("app.py", 8),
        ("manage.py", 8),
        ("wsgi.py", 7),
        ("asgi.py", 7),
        ("routes", 7),
        ("views.py", 6),
        ("api/", 6),
        ("settings.py", 6),
        ("models.py", 5),
        ("src/", 5),
    ),
    "go": (
        ("main.go", 8),
        ("cmd/", 7),
        ("handler", 7),
        ("router", 7),
        ("internal/", 6),
        ("pkg/", 5),
    ),
    "rust": (
        ("src/main.rs", 8),
        ("src/lib.rs", 8),
        ("src/bin/", 6),
        ("src/", 5),
    ),
    "java": (
        ("application.java", 8),
        ("main.java", 8),
        ("controller", 7),
        ("src/main/resources/application", 6),
        ("src/main/java/", 5),
    ),
    "kotlin": (
        ("application.kt", 8),
        ("main.kt", 8),
        ("controller", 7),
        ("src/main/kotlin/", 5),
    ),
    "php": (
        ("index.php", 8),
        ("routes/", 7),
        ("app/http/controllers/", 6),
        ("src/", 5),
    ),
    "ruby": (
        ("config/routes.rb", 8),
        ("config.ru", 8),
        ("app/controllers/", 7),
        ("lib/", 5),
    ),
}


def rank(path: str, language: str | None = None) -> int:
    """Priority of *path*; higher means inspect sooner."""
    lowered = path.lower()
    for pattern, priority in GENERIC_RULES:
        if pattern in lowered:
            return priority
    for pattern, priority in LANGUAGE_RULES.get((language or "").lower(), ()):
        if pattern in lowered:
            return priority
    return BASELINE_PRIORITY


def select_for_inspection(
    entries: Iterable[FileEntry],
    language: str | None = None,
    limit: int = DEFAULT_SAMPLE_LIMIT,
) -> list[FileEntry]:
    """Top *limit* file entries by priority; ties keep tree order."""
    files: Sequence[FileEntry] = [entry for entry in entries if entry.type == "file"]
    ordered = sorted(files, key=lambda entry: -rank(entry.path, language))
    return ordered[: max(limit, 0)]
