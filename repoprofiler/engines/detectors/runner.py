"""Concurrent fan-out of the five detectors with per-detector isolation."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from repoprofiler.engines.detectors.cicd import detect_cicd
from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.engines.detectors.deployment import detect_deployment
from repoprofiler.engines.detectors.endpoints import extract_api_endpoints
from repoprofiler.engines.detectors.env_vars import extract_env_variables
from repoprofiler.engines.detectors.result import Detection
from repoprofiler.engines.detectors.testing import detect_test_config
from repoprofiler.models import (
    ApiEndpoint,
    CicdConfig,
    DeploymentConfig,
    EnvironmentVariable,
    TestConfig,
)

log = structlog.get_logger("repoprofiler.engine")

T = TypeVar("T")


@dataclass(frozen=True)
class DetectorResults:
    cicd: Detection[CicdConfig]
    tests: Detection[TestConfig]
    deployment: Detection[DeploymentConfig]
    endpoints: Detection[tuple[ApiEndpoint, ...]]
    env_vars: Detection[tuple[EnvironmentVariable, ...]]

    @property
    def failures(self) -> dict[str, str]:
        return {
            d.detector: d.error
            for d in (self.cicd, self.tests, self.deployment, self.endpoints, self.env_vars)
            if d.error is not None
        }


async def run_guarded(
    name: str,
    detector: Callable[[DetectionContext], Awaitable[T | None]],
    ctx: DetectionContext,
) -> Detection[T]:
    """Run one detector; any exception becomes a not-detected result."""
    try:
        value = await detector(ctx)
    except Exception as exc:
        log.error("detector.failed", detector=name, repo=ctx.slug, error=str(exc))
        return Detection(detector=name, error=f"{type(exc).__name__}: {exc}")
    return Detection(detector=name, value=value)


async def run_detectors(ctx: DetectionContext) -> DetectorResults:
    """Run all detectors concurrently and wait for every one of them."""
    tasks: dict[str, Callable[[DetectionContext], Awaitable[Any]]] = {
        "cicd": detect_cicd,
        "tests": detect_test_config,
        "deployment": detect_deployment,
        "endpoints": extract_api_endpoints,
        "env_vars": extract_env_variables,
    }
    results = await asyncio.gather(
        *(run_guarded(name, detector, ctx) for name, detector in tasks.items())
    )
    by_name = {result.detector: result for result in results}
    return DetectorResults(**by_name)
