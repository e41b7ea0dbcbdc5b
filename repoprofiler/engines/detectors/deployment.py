"""Deployment detector: platform marker files checked in a fixed priority order."""

from __future__ import annotations

import json
import re
import sys
from collections.abc import Callable

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import structlog

from repoprofiler.engines.detectors.common import ENV_EXAMPLE_FILES
from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.models import DeploymentConfig, DeploymentPlatform, FileEntry, PlatformConfig

log = structlog.get_logger("repoprofiler.engine")

# First platform with a marker present wins.
DEPLOYMENT_MARKERS: tuple[tuple[DeploymentPlatform, tuple[str, ...]], ...] = (
    ("vercel", ("vercel.json",)),
    ("netlify", ("netlify.toml", "_redirects")),
    ("heroku", ("procfile",)),
    ("docker", ("dockerfile", "docker-compose.yml", "docker-compose.yaml")),
)

# Platforms whose process declaration always reads its settings from the environment.
ALWAYS_REQUIRES_ENV: frozenset[str] = frozenset({"heroku"})

_FROM_RE = re.compile(r"^\s*FROM\s+(?:--platform=\S+\s+)?(\S+)", re.IGNORECASE | re.MULTILINE)
_RUNTIME_ENV_KEYS = ("NODE_VERSION", "PYTHON_VERSION", "GO_VERSION", "RUBY_VERSION")


def _str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def parse_vercel(content: str) -> PlatformConfig:
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("vercel.json is not an object")
    build = data.get("build") if isinstance(data.get("build"), dict) else {}
    runtime = None
    functions = data.get("functions")
    if isinstance(functions, dict):
        runtimes = [fn.get("runtime") for fn in functions.values() if isinstance(fn, dict)]
        runtime = next((r for r in runtimes if _str(r)), None)
    return PlatformConfig(
        framework=_str(data.get("framework")),
        build_command=_str(data.get("buildCommand")) or _str(build.get("command")),
        output_directory=_str(data.get("outputDirectory")),
        runtime_version=runtime,
    )


def parse_netlify(content: str) -> PlatformConfig:
    data = tomllib.loads(content)
    build = data.get("build") if isinstance(data.get("build"), dict) else {}
    env = build.get("environment") if isinstance(build.get("environment"), dict) else {}
    runtime = next(
        (str(env[key]) for key in _RUNTIME_ENV_KEYS if env.get(key) not in (None, "")),
        None,
    )
    return PlatformConfig(
        build_command=_str(build.get("command")),
        output_directory=_str(build.get("publish")),
        runtime_version=runtime,
    )


def parse_dockerfile(content: str) -> PlatformConfig:
    """Base image of the first stage, e.g. ``node:18-alpine``."""
    m = _FROM_RE.search(content)
    return PlatformConfig(runtime_version=m.group(1) if m else None)


PLATFORM_PARSERS: dict[str, Callable[[str], PlatformConfig]] = {
    "vercel.json": parse_vercel,
    "netlify.toml": parse_netlify,
    "dockerfile": parse_dockerfile,
}


def _markers_present(ctx: DetectionContext, names: tuple[str, ...]) -> list[FileEntry]:
    found = ctx.find_by_name(*names)
    # parseable root-level declarations first, then other root files, then nested ones
    return sorted(
        found,
        key=lambda entry: ("/" in entry.path, entry.name.lower() not in PLATFORM_PARSERS),
    )


async def _platform_config(ctx: DetectionContext, marker: FileEntry) -> PlatformConfig | None:
    parser = PLATFORM_PARSERS.get(marker.name.lower())
    if parser is None:
        return None
    content = await ctx.read(marker.path)
    if content is None:
        log.debug("deployment.config_absent", repo=ctx.slug, path=marker.path)
        return None
    try:
        return parser(content)
    except (ValueError, tomllib.TOMLDecodeError) as exc:
        log.warning("deployment.config_parse_failed", repo=ctx.slug, path=marker.path, error=str(exc))
        return None


async def detect_deployment(ctx: DetectionContext) -> DeploymentConfig | None:
    for platform, names in DEPLOYMENT_MARKERS:
        markers = _markers_present(ctx, names)
        if not markers:
            continue

        platform_config = await _platform_config(ctx, markers[0])
        build_command = platform_config.build_command if platform_config else None
        if build_command is None and "build" in ctx.manifest.scripts:
            build_command = ctx.manifest.script_command("build")

        requires_env = platform in ALWAYS_REQUIRES_ENV or bool(ctx.find_by_name(*ENV_EXAMPLE_FILES))
        return DeploymentConfig(
            platform=platform,
            config_files=tuple(dict.fromkeys(entry.name for entry in markers)),
            requires_env=requires_env,
            build_command=build_command,
            platform_config=platform_config,
        )
    return None
