"""Contribution-guide synthesis from tree markers and manifest facts."""

from __future__ import annotations

from collections.abc import Sequence

from repoprofiler.engines.manifest.models import ManifestData
from repoprofiler.models import ContributionGuide, FileEntry

GUIDE_FILES = frozenset({"contributing.md", "contribution.md"})
CODE_OF_CONDUCT_FILES = frozenset({"code_of_conduct.md", "code-of-conduct.md"})

OPENING_STEPS = (
    "Fork the repository",
    "Create a feature branch (`git checkout -b feature/amazing-feature`)",
)
CLOSING_STEPS = (
    "Commit your changes (`git commit -m 'Add amazing feature'`)",
    "Push to the branch (`git push origin feature/amazing-feature`)",
    "Open a Pull Request",
)

INSTALL_STEPS: dict[str, str] = {
    "npm": "Install dependencies (`npm install`)",
    "yarn": "Install dependencies (`yarn install`)",
    "pnpm": "Install dependencies (`pnpm install`)",
    "bun": "Install dependencies (`bun install`)",
    "pip": "Create virtual environment and install dependencies",
    "poetry": "Install dependencies (`poetry install`)",
    "go": "Download modules (`go mod download`)",
    "cargo": "Build the crate (`cargo build`)",
    "composer": "Install dependencies (`composer install`)",
    "bundler": "Install dependencies (`bundle install`)",
    "maven": "Build the project (`mvn install`)",
}


def generate_contribution_guide(
    tree: Sequence[FileEntry],
    manifest: ManifestData,
) -> ContributionGuide:
    names = {entry.name.lower() for entry in tree if entry.type == "file"}

    steps = list(OPENING_STEPS)
    install = next((INSTALL_STEPS[m] for m in manifest.package_managers if m in INSTALL_STEPS), None)
    if install:
        steps.append(install)
    if "dev" in manifest.scripts:
        steps.append(f"Start development server (`{manifest.script_command('dev')}`)")
    if "test" in manifest.scripts:
        steps.append(f"Run tests (`{manifest.script_command('test')}`)")
    steps.extend(CLOSING_STEPS)

    return ContributionGuide(
        has_custom_guide=bool(names & GUIDE_FILES),
        code_of_conduct=bool(names & CODE_OF_CONDUCT_FILES),
        suggested_steps=tuple(steps),
    )
