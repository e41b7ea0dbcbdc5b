"""CLI entry point for standalone usage: repoprofiler.

Subcommands:
    repoprofiler analyze owner/repo                 # Print the profile JSON
    repoprofiler analyze https://github.com/o/r -o profile.json
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import sys
from pathlib import Path

import click

from repoprofiler.core.config import ConfigError, Settings
from repoprofiler.core.github import parse_repo_url
from repoprofiler.core.logging import setup_logging
from repoprofiler.engines.analyzer.analyzer import analyze
from repoprofiler.errors import RemoteFetchError, http_status_for

# HTTP-style status of a fatal error -> process exit code
EXIT_CODES: dict[int, int] = {
    404: 4,
    429: 5,
    403: 6,
    401: 7,
    502: 8,
    504: 9,
}
EXIT_FAILURE = 1


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """repoprofiler: structured feature profile of a GitHub repository."""
    setup_logging(level="DEBUG" if verbose else None)


@main.command("analyze")
@click.argument("repository")
@click.option("--token", default=None, help="GitHub token (default: $GITHUB_TOKEN)")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Write JSON here instead of stdout")
@click.option("--compact", is_flag=True, help="Single-line JSON")
@click.option("--sample-limit", type=click.IntRange(min=1), default=None, help="Files inspected for content")
def analyze_command(
    repository: str,
    token: str | None,
    output: str | None,
    compact: bool,
    sample_limit: int | None,
) -> None:
    """Analyze REPOSITORY (owner/repo or a GitHub URL)."""
    try:
        owner, repo = parse_repo_url(repository)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="REPOSITORY") from e

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    overrides: dict[str, object] = {}
    if token:
        overrides["github_token"] = token
    if sample_limit is not None:
        overrides["sample_limit"] = sample_limit
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    try:
        profile = asyncio.run(analyze(owner, repo, settings=settings))
    except RemoteFetchError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CODES.get(http_status_for(e), EXIT_FAILURE))

    text = json.dumps(profile.to_record(), indent=None if compact else 2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Profile for {owner}/{repo} written to {output}", err=True)
    else:
        click.echo(text)


if __name__ == "__main__":
    main()
