"""CI/CD detector: GitHub Actions first, other hosted runners as fallback."""

from __future__ import annotations

import asyncio
import json
import posixpath
import re
from collections.abc import Callable
from typing import Any

import structlog
import yaml

from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.models import CicdConfig, CicdJob, CicdPlatform, CicdStep, FileEntry

log = structlog.get_logger("repoprofiler.engine")

WORKFLOW_DIR = ".github/workflows/"
WORKFLOW_EXTENSIONS = (".yml", ".yaml")
MAX_PARSED_WORKFLOWS = 3

_TESTING_MARKER = "test"
_DEPLOYMENT_MARKER = "deploy"

_JENKINS_STAGE_RE = re.compile(r"""stage\s*\(\s*['"]([^'"]+)['"]\s*\)""")

JobExtractor = Callable[[Any], list[CicdJob]]


# ── step / job extraction ─────────────────────────────────────────────────


def _text_or_none(value: object) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _github_step(raw: object) -> CicdStep | None:
    if not isinstance(raw, dict):
        return None
    name = _text_or_none(raw.get("name")) or _text_or_none(raw.get("uses"))
    return CicdStep(name=name, run=_text_or_none(raw.get("run")))


def _github_jobs(doc: Any) -> list[CicdJob]:
    jobs = doc.get("jobs") if isinstance(doc, dict) else None
    if not isinstance(jobs, dict):
        return []
    result: list[CicdJob] = []
    for job_id, body in jobs.items():
        body = body if isinstance(body, dict) else {}
        raw_steps = body.get("steps")
        if not isinstance(raw_steps, list):
            raw_steps = []
        steps = [step for step in map(_github_step, raw_steps) if step is not None]
        result.append(CicdJob(name=str(body.get("name") or job_id), steps=tuple(steps)))
    return result


def _script_steps(script: object) -> tuple[CicdStep, ...]:
    if isinstance(script, str):
        return (CicdStep(run=script),)
    if isinstance(script, list):
        return tuple(CicdStep(run=str(line)) for line in script)
    return ()


def _gitlab_jobs(doc: Any) -> list[CicdJob]:
    if not isinstance(doc, dict):
        return []
    # hidden (dot-prefixed) keys are templates, not jobs
    return [
        CicdJob(name=str(name), steps=_script_steps(body.get("script")))
        for name, body in doc.items()
        if isinstance(body, dict) and "script" in body and not str(name).startswith(".")
    ]


def _circleci_step(raw: object) -> CicdStep:
    if isinstance(raw, str):
        return CicdStep(name=raw)
    if isinstance(raw, dict) and "run" in raw:
        run = raw["run"]
        if isinstance(run, dict):
            return CicdStep(name=_text_or_none(run.get("name")), run=_text_or_none(run.get("command")))
        return CicdStep(run=_text_or_none(run))
    if isinstance(raw, dict) and raw:
        return CicdStep(name=str(next(iter(raw))))
    return CicdStep()


def _circleci_jobs(doc: Any) -> list[CicdJob]:
    jobs = doc.get("jobs") if isinstance(doc, dict) else None
    if not isinstance(jobs, dict):
        return []
    result: list[CicdJob] = []
    for name, body in jobs.items():
        raw_steps = body.get("steps") if isinstance(body, dict) else None
        steps = tuple(map(_circleci_step, raw_steps)) if isinstance(raw_steps, list) else ()
        result.append(CicdJob(name=str(name), steps=steps))
    return result


def _travis_jobs(doc: Any) -> list[CicdJob]:
    if not isinstance(doc, dict):
        return []
    return [
        CicdJob(name=phase, steps=_script_steps(doc[phase]))
        for phase in ("install", "before_script", "script", "deploy")
        if phase in doc
    ]


def _azure_steps(raw_steps: object) -> tuple[CicdStep, ...]:
    if not isinstance(raw_steps, list):
        return ()
    steps: list[CicdStep] = []
    for raw in raw_steps:
        if not isinstance(raw, dict):
            continue
        run = raw.get("script") or raw.get("bash") or raw.get("powershell")
        name = raw.get("displayName") or raw.get("task")
        steps.append(CicdStep(name=_text_or_none(name), run=_text_or_none(run)))
    return tuple(steps)


def _azure_jobs(doc: Any) -> list[CicdJob]:
    if not isinstance(doc, dict):
        return []
    if isinstance(doc.get("jobs"), list):
        return [
            CicdJob(
                name=str(job.get("job") or job.get("displayName") or "job"),
                steps=_azure_steps(job.get("steps")),
            )
            for job in doc["jobs"]
            if isinstance(job, dict)
        ]
    if "steps" in doc:
        return [CicdJob(name="pipeline", steps=_azure_steps(doc["steps"]))]
    return []


# lower-cased root path -> (platform, extractor); None means a plain-text config
FALLBACK_PLATFORMS: tuple[tuple[str, CicdPlatform, JobExtractor | None], ...] = (
    (".gitlab-ci.yml", "gitlab-ci", _gitlab_jobs),
    (".circleci/config.yml", "circleci", _circleci_jobs),
    (".travis.yml", "travis", _travis_jobs),
    ("jenkinsfile", "jenkins", None),
    ("azure-pipelines.yml", "azure-pipelines", _azure_jobs),
)


def _flags(body: object) -> tuple[bool, bool]:
    """Case-insensitive test/deploy markers over a serialized job body."""
    text = body if isinstance(body, str) else json.dumps(body, default=str)
    lowered = text.lower()
    return _TESTING_MARKER in lowered, _DEPLOYMENT_MARKER in lowered


# ── detector ──────────────────────────────────────────────────────────────


def workflow_files(entries: list[FileEntry]) -> list[FileEntry]:
    return [
        entry
        for entry in entries
        if entry.type == "file"
        and entry.path.lower().startswith(WORKFLOW_DIR)
        and entry.path.lower().endswith(WORKFLOW_EXTENSIONS)
    ]


async def _github_actions(ctx: DetectionContext, files: list[FileEntry]) -> CicdConfig | None:
    selected = files[:MAX_PARSED_WORKFLOWS]
    contents = await asyncio.gather(*(ctx.read(entry.path) for entry in selected))

    retrieved: list[str] = []
    workflows: list[str] = []
    jobs: list[CicdJob] = []
    job_bodies: list[Any] = []
    for entry, content in zip(selected, contents, strict=True):
        if content is None:
            log.debug("cicd.workflow_absent", repo=ctx.slug, path=entry.path)
            continue
        retrieved.append(entry.path)
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            log.warning("cicd.workflow_parse_failed", repo=ctx.slug, path=entry.path, error=str(exc))
            continue
        name = doc.get("name") if isinstance(doc, dict) else None
        workflows.append(str(name) if name else posixpath.splitext(entry.name)[0])
        jobs.extend(_github_jobs(doc))
        if isinstance(doc, dict):
            job_bodies.append(doc.get("jobs"))

    if not retrieved:
        return None

    has_testing, has_deployment = _flags(job_bodies)
    return CicdConfig(
        platform="github-actions",
        config_files=tuple(retrieved),
        workflows=tuple(workflows),
        jobs=tuple(jobs),
        has_testing=has_testing,
        has_deployment=has_deployment,
    )


async def _fallback_platform(ctx: DetectionContext) -> CicdConfig | None:
    by_path = {entry.path.lower(): entry for entry in ctx.files}
    for file_name, platform, extractor in FALLBACK_PLATFORMS:
        entry = by_path.get(file_name)
        if entry is None:
            continue
        content = await ctx.read(entry.path)
        if content is None:
            log.debug("cicd.config_absent", repo=ctx.slug, path=entry.path)
            return None

        if extractor is None:
            jobs = [CicdJob(name=stage) for stage in _JENKINS_STAGE_RE.findall(content)]
            has_testing, has_deployment = _flags(content)
        else:
            try:
                doc = yaml.safe_load(content)
            except yaml.YAMLError as exc:
                log.warning("cicd.config_parse_failed", repo=ctx.slug, path=entry.path, error=str(exc))
                doc = None
            jobs = extractor(doc)
            has_testing, has_deployment = _flags(doc)

        return CicdConfig(
            platform=platform,
            config_files=(entry.path,),
            workflows=(entry.name,),
            jobs=tuple(jobs),
            has_testing=has_testing,
            has_deployment=has_deployment,
        )
    return None


async def detect_cicd(ctx: DetectionContext) -> CicdConfig | None:
    """CI/CD facet; None unless at least one config file's content was retrieved.

    Only the first few GitHub workflow files are read; a workflow that fails to
    parse is skipped without affecting the others.
    """
    files = workflow_files(ctx.files)
    if files:
        return await _github_actions(ctx, files)
    return await _fallback_platform(ctx)
