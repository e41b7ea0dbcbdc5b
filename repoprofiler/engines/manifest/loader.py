"""Pick, fetch and parse the one manifest matching the primary language."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

# Ensure parsers are registered before any manifest is loaded.
import repoprofiler.engines.manifest.parsers  # noqa: F401
from repoprofiler.engines.github.protocols import ContentSource
from repoprofiler.engines.manifest.models import ManifestData
from repoprofiler.engines.manifest.registry import get_parser
from repoprofiler.errors import ManifestParseError
from repoprofiler.models import FileEntry

log = structlog.get_logger("repoprofiler.engine")

# Lower-cased primary language -> manifest file names, most preferred first.
MANIFEST_CANDIDATES: dict[str, tuple[str, ...]] = {
    "javascript": ("package.json",),
    "typescript": ("package.json",),
    "python": ("requirements.txt", "pyproject.toml"),
    "go": ("go.mod",),
    "rust": ("Cargo.toml",),
    "php": ("composer.json",),
    "ruby": ("Gemfile",),
    "java": ("pom.xml",),
    "kotlin": ("pom.xml",),
}

# manifest -> ((lockfile, package manager), ...); first present lockfile wins
LOCKFILE_MANAGERS: dict[str, tuple[tuple[str, str], ...]] = {
    "package.json": (
        ("yarn.lock", "yarn"),
        ("pnpm-lock.yaml", "pnpm"),
        ("bun.lockb", "bun"),
        ("bun.lock", "bun"),
    ),
    "pyproject.toml": (("poetry.lock", "poetry"),),
}


def root_files(tree: Sequence[FileEntry]) -> dict[str, str]:
    """Lower-cased name -> actual path of every file at the repository root."""
    return {
        entry.path.lower(): entry.path
        for entry in tree
        if entry.type == "file" and "/" not in entry.path
    }


def select_manifest(tree: Sequence[FileEntry], language: str | None) -> str | None:
    """Root path of the first manifest candidate present for *language*."""
    present = root_files(tree)
    for candidate in MANIFEST_CANDIDATES.get((language or "").lower(), ()):
        if candidate.lower() in present:
            return present[candidate.lower()]
    return None


def detect_package_managers(tree: Sequence[FileEntry], manifest_file: str) -> tuple[str, ...]:
    """Package manager implied by *manifest_file* and the root lockfiles."""
    parser = get_parser(manifest_file)
    if parser is None:
        return ()
    present = root_files(tree)
    for lockfile, manager in LOCKFILE_MANAGERS.get(manifest_file.lower(), ()):
        if lockfile in present:
            return (manager,)
    return (parser.package_manager,)


async def load_manifest(
    client: ContentSource,
    owner: str,
    repo: str,
    tree: Sequence[FileEntry],
    language: str | None,
) -> ManifestData:
    """Fetch and parse the manifest; never raises.

    Absent content or a parse failure yields empty dependency and script maps,
    while the package manager (derived from the tree alone) is kept.
    """
    manifest_file = select_manifest(tree, language)
    if manifest_file is None:
        log.debug("manifest.none", repo=f"{owner}/{repo}", language=language)
        return ManifestData()

    managers = detect_package_managers(tree, manifest_file)
    parser = get_parser(manifest_file)
    content = await client.fetch_file_content(owner, repo, manifest_file)
    if content is None or parser is None:
        log.warning("manifest.content_absent", repo=f"{owner}/{repo}", file=manifest_file)
        return ManifestData(file_name=manifest_file, package_managers=managers, degraded=True)

    try:
        parsed = parser.parse(content)
    except Exception as exc:
        # ManifestParseError for malformed files; anything else is a well-formed
        # file with an unexpected shape
        error = str(exc) if isinstance(exc, ManifestParseError) else f"{type(exc).__name__}: {exc}"
        log.warning(
            "manifest.parse_failed",
            repo=f"{owner}/{repo}",
            file=manifest_file,
            error=error,
        )
        return ManifestData(file_name=manifest_file, package_managers=managers, degraded=True)

    log.debug(
        "manifest.parsed",
        repo=f"{owner}/{repo}",
        file=manifest_file,
        dependencies=len(parsed.dependencies),
        scripts=len(parsed.scripts),
    )
    return ManifestData(
        file_name=manifest_file,
        package_managers=managers,
        dependencies=parsed.dependencies,
        scripts=parsed.scripts,
    )
