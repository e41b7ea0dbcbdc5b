"""Parser for npm package.json files."""

from __future__ import annotations

import json

from repoprofiler.engines.manifest.models import ParsedManifest
from repoprofiler.engines.manifest.registry import register_parser
from repoprofiler.errors import ManifestParseError

_DEP_SECTIONS = ("dependencies", "devDependencies")


def _string_map(value: object) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in value.items()}


class PackageJsonParser:
    file_name = "package.json"
    package_manager = "npm"

    def parse(self, content: str) -> ParsedManifest:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(self.file_name, str(exc)) from exc
        if not isinstance(data, dict):
            raise ManifestParseError(self.file_name, "top-level value is not an object")

        deps: dict[str, str] = {}
        for section in _DEP_SECTIONS:
            deps.update(_string_map(data.get(section)))

        return ParsedManifest(dependencies=deps, scripts=_string_map(data.get("scripts")))


register_parser(PackageJsonParser())
