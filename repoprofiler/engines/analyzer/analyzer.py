"""Engine entry point: ``analyze(owner, repo) -> ProjectAnalysis``."""

from __future__ import annotations

import asyncio
import time

import structlog

from repoprofiler.core.config import Settings
from repoprofiler.engines.analyzer.aggregator import build_profile
from repoprofiler.engines.dependencies.categorizer import categorize, detect_frameworks
from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.engines.detectors.runner import run_detectors
from repoprofiler.engines.file_tree.normalizer import load_file_tree
from repoprofiler.engines.generators.badges import generate_badges
from repoprofiler.engines.generators.contribution import generate_contribution_guide
from repoprofiler.engines.generators.logo import generate_logo
from repoprofiler.engines.github.cache import CachedContentSource
from repoprofiler.engines.github.client import GitHubClient
from repoprofiler.engines.github.protocols import RepositorySource
from repoprofiler.engines.manifest.loader import load_manifest
from repoprofiler.engines.sampler.priority import DEFAULT_SAMPLE_LIMIT, select_for_inspection
from repoprofiler.engines.sampler.snippets import collect_snippets
from repoprofiler.models import ProjectAnalysis

log = structlog.get_logger("repoprofiler.engine")


class RepositoryAnalyzer:
    """Stateless pipeline over one :class:`RepositorySource`.

    Metadata and tree failures propagate as remote-fetch errors; every later
    failure only makes the profile less complete.
    """

    def __init__(self, client: RepositorySource, *, sample_limit: int = DEFAULT_SAMPLE_LIMIT) -> None:
        self._client = client
        self._sample_limit = sample_limit

    async def analyze(self, owner: str, repo: str) -> ProjectAnalysis:
        slug = f"{owner}/{repo}"
        started = time.monotonic()
        log.info("analysis.started", repo=slug)

        repository = await self._client.fetch_metadata(owner, repo)
        tree = await load_file_tree(self._client, owner, repo, ref=repository.default_branch)
        language = repository.language
        reader = CachedContentSource(self._client)

        # ── sampling ∥ manifest ──────────────────────────────────────────
        sampled = select_for_inspection(tree, language, self._sample_limit)
        snippets, manifest = await asyncio.gather(
            collect_snippets(reader, owner, repo, sampled),
            load_manifest(reader, owner, repo, tree, language),
        )

        categorized = categorize(manifest.dependencies)
        frameworks = detect_frameworks(manifest.dependencies)

        # ── detectors (join barrier) ─────────────────────────────────────
        ctx = DetectionContext(
            client=reader,
            owner=owner,
            repo=repo,
            tree=tree,
            snippets=snippets,
            manifest=manifest,
            language=language,
        )
        detections = await run_detectors(ctx)

        # ── generators + aggregation ─────────────────────────────────────
        profile = build_profile(
            repository=repository,
            tree=tree,
            snippets=snippets,
            manifest=manifest,
            categorized=categorized,
            frameworks=frameworks,
            detections=detections,
            logo=generate_logo(repository),
            badges=generate_badges(
                owner,
                repository,
                cicd=detections.cicd.value,
                tests=detections.tests.value,
                deployment=detections.deployment.value,
            ),
            contribution=generate_contribution_guide(tree, manifest),
            sample_limit=self._sample_limit,
        )

        log.info(
            "analysis.completed",
            repo=slug,
            files=len(tree),
            snippets=len(profile.summarized_code_snippets),
            endpoints=len(profile.api_endpoints),
            detector_failures=detections.failures or None,
            elapsed_ms=round((time.monotonic() - started) * 1000),
        )
        return profile


async def analyze(
    owner: str,
    repo: str,
    *,
    settings: Settings | None = None,
) -> ProjectAnalysis:
    """Analyze ``owner/repo`` with a client built from *settings* (or the environment)."""
    settings = settings or Settings.from_env()
    async with GitHubClient(
        settings.github_token,
        base_url=settings.api_base_url,
        timeout=settings.timeout,
    ) as client:
        return await RepositoryAnalyzer(client, sample_limit=settings.sample_limit).analyze(
            owner, repo
        )
