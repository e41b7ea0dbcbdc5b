"""Test-configuration detector: tree paths plus manifest scripts and dependencies."""

from __future__ import annotations

import structlog

from repoprofiler.engines.detectors.context import DetectionContext
from repoprofiler.models import TestConfig

log = structlog.get_logger("repoprofiler.engine")

MAX_TEST_FILES = 10

TEST_PATH_MARKERS: tuple[str, ...] = ("test", "spec", "__tests__", "cypress", "e2e", "playwright")
_UNIT_NAME_MARKERS: tuple[str, ...] = (".test.", ".spec.", "_test.", "test_", "_spec.")
_E2E_PATH_MARKERS: tuple[str, ...] = ("e2e", "cypress", "playwright")

# script -> (runs something, unit, e2e, coverage)
TEST_SCRIPTS: tuple[tuple[str, bool, bool, bool, bool], ...] = (
    ("test", True, False, False, False),
    ("test:unit", True, True, False, False),
    ("test:e2e", True, False, True, False),
    ("e2e", True, False, True, False),
    ("test:coverage", False, False, False, True),
    ("coverage", False, False, False, True),
)

# (label, dependency names, browser-driven); first match wins
TEST_FRAMEWORKS: tuple[tuple[str, tuple[str, ...], bool], ...] = (
    ("Jest", ("jest",), False),
    ("Mocha", ("mocha",), False),
    ("Cypress", ("cypress",), True),
    ("Playwright", ("playwright", "@playwright/test"), True),
    ("Vitest", ("vitest",), False),
    ("pytest", ("pytest",), False),
    ("RSpec", ("rspec", "rspec-rails"), False),
    ("PHPUnit", ("phpunit/phpunit",), False),
    ("JUnit", ("junit:junit", "org.junit.jupiter:junit-jupiter", "org.junit.jupiter:junit-jupiter-api"), False),
    ("Testify", ("github.com/stretchr/testify",), False),
)

# lower-cased language -> command used when the manifest declares none
DEFAULT_COMMANDS: dict[str, str] = {
    "javascript": "npm test",
    "typescript": "npm test",
    "python": "pytest",
    "go": "go test ./...",
    "rust": "cargo test",
    "ruby": "bundle exec rspec",
    "php": "vendor/bin/phpunit",
    "java": "mvn test",
    "kotlin": "mvn test",
}


def _framework(dependencies: dict[str, str]) -> tuple[str, bool] | None:
    names = {name.lower() for name in dependencies}
    for label, candidates, browser in TEST_FRAMEWORKS:
        if any(candidate in names for candidate in candidates):
            return label, browser
    return None


async def detect_test_config(ctx: DetectionContext) -> TestConfig | None:
    """Test facet; None only when neither the tree nor the manifest gives a signal."""
    test_files = [
        entry for entry in ctx.files if any(m in entry.path.lower() for m in TEST_PATH_MARKERS)
    ]

    commands: list[str] = []
    unit = e2e = coverage = False
    script_signal = False
    for script, runs, is_unit, is_e2e, is_coverage in TEST_SCRIPTS:
        if script not in ctx.manifest.scripts:
            continue
        script_signal = True
        if runs:
            commands.append(ctx.manifest.script_command(script))
        unit = unit or is_unit
        e2e = e2e or is_e2e
        coverage = coverage or is_coverage

    framework = _framework(ctx.manifest.dependencies)
    if not test_files and not script_signal and framework is None:
        return None

    label = "Unknown"
    if framework is not None:
        label, browser = framework
        if browser:
            e2e = True
        else:
            unit = True

    if any(m in entry.name.lower() for entry in test_files for m in _UNIT_NAME_MARKERS):
        unit = True
    if any(m in entry.path.lower() for entry in test_files for m in _E2E_PATH_MARKERS):
        e2e = True

    if not commands:
        default = DEFAULT_COMMANDS.get((ctx.language or "").lower())
        if default:
            commands.append(default)

    log.debug("tests.detected", repo=ctx.slug, framework=label, files=len(test_files))
    return TestConfig(
        framework=label,
        commands=tuple(commands),
        coverage=coverage,
        e2e_tests=e2e,
        unit_tests=unit,
        test_files=tuple(entry.path for entry in test_files[:MAX_TEST_FILES]),
    )
