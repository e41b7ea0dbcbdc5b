"""Fetch sampled files and annotate them as code snippets."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Sequence

import structlog

from repoprofiler.engines.github.protocols import ContentSource
from repoprofiler.models import CodeSnippet, Complexity, FileEntry

log = structlog.get_logger("repoprofiler.engine")

SUMMARY_PLACEHOLDER = "Awaiting AI summary"

# (feature tag, substrings searched in lower-cased content)
FEATURE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("React", ("react", "jsx")),
    ("Vue", ("vue",)),
    ("Angular", ("angular",)),
    ("Express", ("express",)),
    ("Next.js", ("next",)),
    ("MongoDB", ("mongoose", "mongodb")),
    ("PostgreSQL", ("sequelize", "postgres")),
    ("Prisma", ("prisma",)),
    ("Authentication", ("auth", "jwt")),
    ("Passport.js", ("passport",)),
    ("API Integration", ("axios", "fetch")),
    ("GraphQL", ("graphql",)),
    ("Testing", ("jest", "test")),
    ("E2E Testing", ("cypress", "playwright")),
)

_FUNCTION_RE = re.compile(r"function|=>|\bdef\b|\bclass\b")
_IMPORT_RE = re.compile(r"import|require|from")

_JS_EXPORTED_FN_RE = re.compile(r"export\s+(?:default\s+)?function\s+(\w+)")
_JS_ARROW_RE = re.compile(r"const\s+(\w+)\s*=.*?=>")
_PY_MAIN_RE = re.compile(r"def\s+main\s*\(")
_PY_DEF_RE = re.compile(r"def\s+(\w+)\s*\(")
_JAVA_MAIN_RE = re.compile(r"public\s+static\s+void\s+main")
_JAVA_CLASS_RE = re.compile(r"public\s+class\s+(\w+)")


def detect_code_features(content: str) -> tuple[str, ...]:
    lowered = content.lower()
    return tuple(
        feature
        for feature, needles in FEATURE_KEYWORDS
        if any(needle in lowered for needle in needles)
    )


def assess_complexity(content: str) -> Complexity:
    """Crude size score: lines + 2 * function markers + import markers."""
    lines = len(content.split("\n"))
    functions = len(_FUNCTION_RE.findall(content))
    imports = len(_IMPORT_RE.findall(content))
    score = lines + functions * 2 + imports
    if score < 100:
        return "low"
    if score < 300:
        return "medium"
    return "high"


def extract_main_function(content: str) -> str:
    for pattern in (_JS_EXPORTED_FN_RE, _JS_ARROW_RE):
        m = pattern.search(content)
        if m:
            return m.group(1)
    if _PY_MAIN_RE.search(content):
        return "main"
    m = _PY_DEF_RE.search(content)
    if m:
        return m.group(1)
    if _JAVA_MAIN_RE.search(content):
        return "main"
    m = _JAVA_CLASS_RE.search(content)
    if m:
        return m.group(1)
    return "main"


def build_snippet(path: str, content: str) -> CodeSnippet:
    return CodeSnippet(
        file_name=path,
        content=content,
        summary=SUMMARY_PLACEHOLDER,
        detected_features=detect_code_features(content),
        complexity=assess_complexity(content),
        main_function=extract_main_function(content),
    )


async def collect_snippets(
    client: ContentSource,
    owner: str,
    repo: str,
    entries: Sequence[FileEntry],
) -> list[CodeSnippet]:
    """Fetch *entries* concurrently; files whose content is absent are skipped.

    Output order follows *entries*.
    """
    contents = await asyncio.gather(
        *(client.fetch_file_content(owner, repo, entry.path) for entry in entries)
    )
    snippets: list[CodeSnippet] = []
    for entry, content in zip(entries, contents, strict=True):
        if content is None:
            log.debug("sampler.content_absent", path=entry.path)
            continue
        snippets.append(build_snippet(entry.path, content))
    return snippets
