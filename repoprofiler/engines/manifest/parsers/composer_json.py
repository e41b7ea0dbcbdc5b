"""Parser for PHP composer.json files."""

from __future__ import annotations

import json

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser
from repoprofiler.errors import ManifestParseError

_DEP_SECTIONS = ("require", "require-dev")


def _is_platform_package(name: str) -> bool:
    """``php`` and ``ext-*`` entries pin the runtime, not a library."""
    return name == "php" or name.startswith("ext-")


class ComposerJsonParser:
    file_name = "composer.json"
    package_manager = "composer"

    def parse(self, content: str) -> ParsedManifest:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(self.file_name, str(exc)) from exc
        if not isinstance(data, dict):
            raise ManifestParseError(self.file_name, "top-level value is not an object")

        deps: dict[str, str] = {}
        for section in _DEP_SECTIONS:
            table = data.get(section)
            if not isinstance(table, dict):
                continue
            for name, version in table.items():
                if not _is_platform_package(name):
                    deps[name] = str(version)

        scripts: dict[str, str] = {}
        raw_scripts = data.get("scripts")
        if isinstance(raw_scripts, dict):
            for name, command in raw_scripts.items():
                if isinstance(command, list):
                    command = " && ".join(str(c) for c in command)
                scripts[name] = str(command)

        return ParsedManifest(dependencies=deps, scripts=scripts)


register_parser(ComposerJsonParser())
