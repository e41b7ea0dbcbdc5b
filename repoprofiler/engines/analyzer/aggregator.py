"""Single-writer assembly of the immutable profile."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from repoprofiler.engines.detectors.endpoints import dedupe_endpoints
from repoprofiler.engines.detectors.env_vars import dedupe_env_variables
from repoprofiler.engines.detectors.runner import DetectorResults
from repoprofiler.engines.detectors.testing import MAX_TEST_FILES
from repoprofiler.engines.file_tree.normalizer import render_file_tree
from repoprofiler.engines.manifest.models import ManifestData
from repoprofiler.engines.sampler.priority import DEFAULT_SAMPLE_LIMIT
from repoprofiler.models import (
    Badge,
    CodeSnippet,
    ContributionGuide,
    FileEntry,
    ProjectAnalysis,
    ProjectLogo,
    RepositoryMetadata,
    TestConfig,
)

KEY_FILES: tuple[str, ...] = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "go.mod",
    "cargo.toml",
    "composer.json",
    "gemfile",
    "pom.xml",
    "build.gradle",
    "dockerfile",
    "docker-compose.yml",
    "readme.md",
)


def _root_names(tree: Sequence[FileEntry]) -> list[str]:
    return [entry.name.lower() for entry in tree if entry.type == "file" and "/" not in entry.path]


def _capped_tests(config: TestConfig | None) -> TestConfig | None:
    if config is None or len(config.test_files) <= MAX_TEST_FILES:
        return config
    return config.model_copy(update={"test_files": config.test_files[:MAX_TEST_FILES]})


def build_profile(
    *,
    repository: RepositoryMetadata,
    tree: Sequence[FileEntry],
    snippets: Sequence[CodeSnippet],
    manifest: ManifestData,
    categorized: Mapping[str, Sequence[str]],
    frameworks: Sequence[str],
    detections: DetectorResults,
    logo: ProjectLogo,
    badges: Sequence[Badge],
    contribution: ContributionGuide,
    sample_limit: int = DEFAULT_SAMPLE_LIMIT,
) -> ProjectAnalysis:
    """Merge every stage's output; only caps and dedup are enforced here."""
    root_names = _root_names(tree)
    return ProjectAnalysis(
        repository=repository,
        main_language=repository.language,
        frameworks=tuple(frameworks),
        package_managers=manifest.package_managers,
        dependencies=dict(manifest.dependencies),
        categorized_dependencies={k: tuple(v) for k, v in categorized.items()},
        scripts=dict(manifest.scripts),
        has_documentation=any(name.startswith("readme") for name in root_names),
        structure=tuple(tree),
        key_files=tuple(name for name in root_names if name in KEY_FILES),
        full_file_tree=render_file_tree(tree),
        summarized_code_snippets=tuple(snippets[: max(sample_limit, 0)]),
        api_endpoints=tuple(dedupe_endpoints(list(detections.endpoints.value or ()))),
        env_variables=tuple(dedupe_env_variables(list(detections.env_vars.value or ()))),
        badges=tuple(badges),
        cicd_config=detections.cicd.value,
        test_config=_capped_tests(detections.tests.value),
        deployment_config=detections.deployment.value,
        project_logo=logo,
        contribution_guide=contribution,
    )
