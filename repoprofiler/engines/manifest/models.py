"""Data models for the manifest engine."""

from __future__ import annotations

from dataclasses import dataclass, field

_JS_RUNNERS = ("npm", "yarn", "pnpm", "bun")


@dataclass(frozen=True)
class ParsedManifest:
    """Dependencies and scripts decoded from one manifest file."""

    dependencies: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ManifestData:
    """Manifest facts shared read-only by the categorizer and detectors.

    ``file_name`` is None when the language has no known manifest or none of
    its candidates exists at the repository root. ``degraded`` marks a manifest
    that was present but could not be fetched or parsed.
    """

    file_name: str | None = None
    package_managers: tuple[str, ...] = ()
    dependencies: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)
    degraded: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.dependencies and not self.scripts

    def script_command(self, script: str) -> str:
        """Shell invocation of *script* with this manifest's package manager."""
        manager = self.package_managers[0] if self.package_managers else "npm"
        if manager in _JS_RUNNERS:
            return f"{manager} test" if script == "test" else f"{manager} run {script}"
        if manager == "composer":
            return f"composer run-script {script}"
        if manager == "poetry":
            return f"poetry run {script}"
        # pip console scripts are installed as executables
        return script
