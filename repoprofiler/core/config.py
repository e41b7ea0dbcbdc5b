"""Runtime settings read once at the entry point and passed down explicitly."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_SAMPLE_LIMIT = 10


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class Settings:
    """Engine settings.

    The engine itself never reads ``os.environ``; callers build a
    :class:`Settings` (usually via :meth:`from_env`) and hand its values to
    :class:`~repoprofiler.engines.github.client.GitHubClient` and
    :class:`~repoprofiler.engines.analyzer.analyzer.RepositoryAnalyzer`.
    """

    github_token: str | None = None
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    sample_limit: int = DEFAULT_SAMPLE_LIMIT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Reads:
            GITHUB_TOKEN              : optional API token
            REPOPROFILER_API_BASE_URL : API root (default: https://api.github.com)
            REPOPROFILER_TIMEOUT      : per-request timeout in seconds (default: 10)
            REPOPROFILER_SAMPLE_LIMIT : files inspected per analysis (default: 10)
        """
        env = os.environ if environ is None else environ
        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            api_base_url=env.get("REPOPROFILER_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            timeout=_as_float(env, "REPOPROFILER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            sample_limit=_as_positive_int(env, "REPOPROFILER_SAMPLE_LIMIT", DEFAULT_SAMPLE_LIMIT),
        )


def _as_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {raw!r}")
    return value


def _as_positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{key} must be at least 1, got {raw!r}")
    return value
