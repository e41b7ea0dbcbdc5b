"""Retrieve the repository file listing once and strip build/VCS noise."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from repoprofiler.engines.github.protocols import RepositorySource
from repoprofiler.errors import RemoteFetchError
from repoprofiler.models import FileEntry

log = structlog.get_logger("repoprofiler.engine")

IGNORED_DIRS: tuple[str, ...] = (
    ".git",
    "node_modules",
    ".next",
    "dist",
    "build",
    "out",
    "coverage",
    "__pycache__",
    ".venv",
    "venv",
    "target",
    "vendor",
)

MAX_RENDERED_LINES = 400
TREE_UNAVAILABLE = "File tree not available."


def is_ignored(path: str, ignored: Iterable[str] = IGNORED_DIRS) -> bool:
    """True if *path* is, or lives under, one of the *ignored* top-level directories."""
    return any(path == name or path.startswith(f"{name}/") for name in ignored)


def filter_ignored(entries: Iterable[FileEntry]) -> list[FileEntry]:
    """Drop ignored entries, preserving the remote's order."""
    return [entry for entry in entries if not is_ignored(entry.path)]


async def load_file_tree(
    client: RepositorySource,
    owner: str,
    repo: str,
    *,
    ref: str = "HEAD",
) -> list[FileEntry]:
    """Recursive listing, falling back to a shallow root listing.

    Raises the fallback's remote-fetch error when both calls fail.
    """
    try:
        entries = await client.fetch_tree(owner, repo, ref)
    except RemoteFetchError as exc:
        log.warning(
            "file_tree.recursive_failed",
            repo=f"{owner}/{repo}",
            ref=ref,
            error=str(exc),
        )
        entries = await client.list_directory(owner, repo, "")
        log.info("file_tree.shallow_fallback", repo=f"{owner}/{repo}", entries=len(entries))

    return filter_ignored(entries)


def render_file_tree(entries: Sequence[FileEntry], limit: int = MAX_RENDERED_LINES) -> str:
    """One path per line, bounded to *limit* lines."""
    if not entries:
        return TREE_UNAVAILABLE
    lines = [entry.path for entry in entries[:limit]]
    hidden = len(entries) - len(lines)
    if hidden > 0:
        lines.append(f"... ({hidden} more)")
    return "\n".join(lines)
