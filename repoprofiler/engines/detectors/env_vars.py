"""Environment-variable extractor: example-env file first, then source reads."""

from __future__ import annotations

import re

import structlog

from repoprofiler.engines.detectors.common import ENV_EXAMPLE_FILES
from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.models import EnvironmentVariable, FileEntry

log = structlog.get_logger("repoprofiler.engine")

ENV_LINE_RE = re.compile(r"^\s*(?:export\s+)?([A-Z_][A-Z0-9_]*)\s*=\s*(.*)$")

_KEY = r"([A-Z_][A-Z0-9_]*)"
_Q = r"""['"]"""

# lower-cased language -> environment-read call patterns; group 1 is the key
ENV_READ_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "javascript": (
        re.compile(rf"process\.env\.{_KEY}\b"),
        re.compile(rf"process\.env\[\s*{_Q}{_KEY}{_Q}\s*\]"),
        re.compile(rf"import\.meta\.env\.{_KEY}\b"),
    ),
    "python": (
        re.compile(rf"os\.environ\[\s*{_Q}{_KEY}{_Q}\s*\]"),
        re.compile(rf"os\.environ\.get\(\s*{_Q}{_KEY}{_Q}"),
        re.compile(rf"os\.getenv\(\s*{_Q}{_KEY}{_Q}"),
    ),
    "go": (re.compile(rf"os\.(?:Getenv|LookupEnv)\(\s*\"{_KEY}\""),),
    "rust": (re.compile(rf"env::var(?:_os)?\(\s*\"{_KEY}\""),),
    "ruby": (
        re.compile(rf"ENV\[\s*{_Q}{_KEY}{_Q}\s*\]"),
        re.compile(rf"ENV\.fetch\(\s*{_Q}{_KEY}{_Q}"),
    ),
    "php": (
        re.compile(rf"getenv\(\s*{_Q}{_KEY}{_Q}"),
        re.compile(rf"\$_ENV\[\s*{_Q}{_KEY}{_Q}\s*\]"),
        re.compile(rf"env\(\s*{_Q}{_KEY}{_Q}"),
    ),
    "java": (re.compile(rf"System\.getenv\(\s*\"{_KEY}\""),),
}
ENV_READ_PATTERNS["typescript"] = ENV_READ_PATTERNS["javascript"]
ENV_READ_PATTERNS["kotlin"] = ENV_READ_PATTERNS["java"]

ENV_DESCRIPTIONS: dict[str, str] = {
    "DATABASE_URL": "Database connection string",
    "API_KEY": "External API key",
    "SECRET_KEY": "Application secret key",
    "JWT_SECRET": "JWT signing secret",
    "PORT": "Application port number",
    "NODE_ENV": "Node.js environment",
    "REDIS_URL": "Redis connection string",
    "MONGODB_URI": "MongoDB connection string",
    "POSTGRES_URL": "PostgreSQL connection string",
    "NEXTAUTH_SECRET": "NextAuth.js secret",
    "NEXTAUTH_URL": "NextAuth.js URL",
    "REPLICATE_API_TOKEN": "Replicate API token",
    "GITHUB_TOKEN": "GitHub API token",
    "OPENAI_API_KEY": "OpenAI API key",
}
DEFAULT_DESCRIPTION = "Environment variable"


def describe(key: str) -> str:
    return ENV_DESCRIPTIONS.get(key, DEFAULT_DESCRIPTION)


def _patterns_for(language: str | None) -> tuple[re.Pattern[str], ...]:
    patterns = ENV_READ_PATTERNS.get((language or "").lower())
    if patterns is not None:
        return patterns
    # unknown language: any known read call counts
    return tuple(dict.fromkeys(p for group in ENV_READ_PATTERNS.values() for p in group))


def _default_value(raw: str) -> str | None:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    elif " #" in value:
        value = value.split(" #", 1)[0].rstrip()
    return value or None


def parse_env_example(content: str) -> list[EnvironmentVariable]:
    found: list[EnvironmentVariable] = []
    for line in content.splitlines():
        m = ENV_LINE_RE.match(line)
        if m:
            key = m.group(1)
            found.append(
                EnvironmentVariable(
                    key=key,
                    description=describe(key),
                    required=True,
                    default_value=_default_value(m.group(2)),
                )
            )
    return found


def scan_env_reads(content: str, language: str | None) -> list[str]:
    """Keys read through environment calls, in order of first appearance."""
    hits: list[tuple[int, str]] = []
    for pattern in _patterns_for(language):
        hits.extend((m.start(), m.group(1)) for m in pattern.finditer(content))
    return list(dict.fromkeys(key for _, key in sorted(hits)))


def canonical_env_file(ctx: DetectionContext) -> FileEntry | None:
    for name in ENV_EXAMPLE_FILES:
        matches = sorted(ctx.find_by_name(name), key=lambda entry: "/" in entry.path)
        if matches:
            return matches[0]
    return None


def dedupe_env_variables(variables: list[EnvironmentVariable]) -> list[EnvironmentVariable]:
    unique: dict[str, EnvironmentVariable] = {}
    for variable in variables:
        unique.setdefault(variable.key, variable)
    return list(unique.values())


async def extract_env_variables(ctx: DetectionContext) -> tuple[EnvironmentVariable, ...]:
    variables: list[EnvironmentVariable] = []

    env_file = canonical_env_file(ctx)
    if env_file is not None:
        content = await ctx.read(env_file.path)
        if content is None:
            log.debug("env_vars.example_absent", repo=ctx.slug, path=env_file.path)
        else:
            variables.extend(parse_env_example(content))

    for snippet in ctx.snippets:
        for key in scan_env_reads(snippet.content, ctx.language):
            variables.append(EnvironmentVariable(key=key, description=describe(key), required=True))

    return tuple(dedupe_env_variables(variables))
